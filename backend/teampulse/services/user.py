from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from teampulse.exceptions import NotFoundError
from teampulse.models.user import User

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession


async def get_user_or_404(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User")
    return user


async def lock_user(session: AsyncSession, user_id: uuid.UUID) -> User:
    """Load a user row ``FOR UPDATE``.

    Points and WFH changes for one user serialize on this lock.
    """
    result = await session.execute(select(User).where(col(User.id) == user_id).with_for_update())
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User")
    return user
