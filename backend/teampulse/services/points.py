from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from teampulse.models.enums import AuditAction, AuditEntityType
from teampulse.models.points import PointTransaction
from teampulse.schemas.points import (
    GrantPointsResponse,
    PointsBalanceResponse,
    PointTransactionListResponse,
    PointTransactionResponse,
)
from teampulse.services.audit import model_to_audit_dict, write_audit_log
from teampulse.services.user import get_user_or_404, lock_user

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from teampulse.schemas.auth import AuthContext
    from teampulse.schemas.points import GrantPointsRequest

logger = logging.getLogger(__name__)


def _build_transaction_response(txn: PointTransaction) -> PointTransactionResponse:
    return PointTransactionResponse(
        id=txn.id,
        user_id=txn.user_id,
        admin_id=txn.admin_id,
        points=txn.points,
        description=txn.description,
        created_at=txn.created_at,
    )


async def get_balance(session: AsyncSession, user_id: uuid.UUID) -> PointsBalanceResponse:
    user = await get_user_or_404(session, user_id)
    return PointsBalanceResponse(user_id=user.id, username=user.username, points=user.points)


async def grant_points(
    session: AsyncSession,
    auth: AuthContext,
    user_id: uuid.UUID,
    payload: GrantPointsRequest,
) -> GrantPointsResponse:
    """Credit points to a user and journal the grant in one transaction."""
    user = await lock_user(session, user_id)

    user.points += payload.points
    txn = PointTransaction(
        user_id=user.id,
        admin_id=auth.user_id,
        points=payload.points,
        description=payload.description,
    )
    session.add_all([user, txn])
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.POINTS,
        entity_id=txn.id,
        action=AuditAction.GRANT,
        after_json=model_to_audit_dict(txn),
    )

    await session.commit()
    await session.refresh(user)
    await session.refresh(txn)
    logger.info("Granted %d points to %s by %s", payload.points, user.id, auth.user_id)
    return GrantPointsResponse(
        balance=PointsBalanceResponse(user_id=user.id, username=user.username, points=user.points),
        transaction=_build_transaction_response(txn),
    )


async def list_transactions(
    session: AsyncSession,
    user_id: uuid.UUID,
    offset: int = 0,
    limit: int = 50,
) -> PointTransactionListResponse:
    """Points grants for a user, newest first."""
    await get_user_or_404(session, user_id)
    base_filter = [col(PointTransaction.user_id) == user_id]

    count_result = await session.execute(select(func.count()).select_from(PointTransaction).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(PointTransaction)
        .where(*base_filter)
        .order_by(col(PointTransaction.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    return PointTransactionListResponse(
        items=[_build_transaction_response(t) for t in result.scalars().all()],
        total=total,
    )
