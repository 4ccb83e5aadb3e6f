from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from teampulse.exceptions import AuthenticationError, NotFoundError
from teampulse.models.enums import AuthType, UserRole
from teampulse.models.user import User
from teampulse.schemas.auth import LoginResponse, UserResponse
from teampulse.security import issue_token

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from teampulse.config import Settings
    from teampulse.schemas.auth import AuthContext, LoginRequest
    from teampulse.services.credentials import CredentialValidator

logger = logging.getLogger(__name__)


def build_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        points=user.points,
        created_at=user.created_at,
    )


async def login(
    session: AsyncSession,
    settings: Settings,
    validator: CredentialValidator,
    payload: LoginRequest,
) -> LoginResponse:
    """Check credentials externally and issue a session token.

    A first successful login creates the local user as a member.
    """
    identity = await validator.validate(payload.username, payload.password)
    if identity is None:
        logger.info("Login rejected for %s", payload.username)
        raise AuthenticationError("Invalid username or password")

    result = await session.execute(select(User).where(col(User.username) == identity.username))
    user = result.scalar_one_or_none()
    if user is None:
        user = User(username=identity.username, email=identity.email, role=UserRole.MEMBER)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        logger.info("Created user %s on first login", user.username)
    elif identity.email and user.email != identity.email:
        user.email = identity.email
        session.add(user)
        await session.commit()
        await session.refresh(user)

    auth_type = AuthType.REDMINE if settings.use_redmine_auth else AuthType.LOCAL
    token = issue_token(settings, user, auth_type, external_username=identity.username)
    logger.info("User %s logged in", user.username)
    return LoginResponse(token=token, user=build_user_response(user))


async def get_current_user(session: AsyncSession, auth: AuthContext) -> UserResponse:
    user = await session.get(User, auth.user_id)
    if user is None:
        raise NotFoundError("User")
    return build_user_response(user)
