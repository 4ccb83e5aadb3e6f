from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlmodel import col

from teampulse.exceptions import NotFoundError, ValidationError
from teampulse.models.enums import AuditAction, AuditEntityType
from teampulse.models.team import Team, TeamMember
from teampulse.models.top_performer import TopPerformer
from teampulse.models.user import User
from teampulse.schemas.top_performer import TopPerformerListResponse, TopPerformerResponse
from teampulse.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from teampulse.schemas.auth import AuthContext
    from teampulse.schemas.top_performer import SetTopPerformerRequest

logger = logging.getLogger(__name__)


async def list_top_performers(session: AsyncSession, month: int, year: int) -> TopPerformerListResponse:
    """Leaderboard for a month ordered by rank."""
    result = await session.execute(
        select(TopPerformer, User, Team)
        .join(User, col(User.id) == col(TopPerformer.user_id))
        .outerjoin(Team, col(Team.id) == col(TopPerformer.team_id))
        .where(col(TopPerformer.month) == month, col(TopPerformer.year) == year)
        .order_by(col(TopPerformer.rank))
    )
    return TopPerformerListResponse(
        month=month,
        year=year,
        items=[
            TopPerformerResponse(
                id=entry.id,
                user_id=user.id,
                username=user.username,
                team_id=entry.team_id,
                team_name=team.name if team else None,
                rank=entry.rank,
                month=entry.month,
                year=entry.year,
                created_at=entry.created_at,
            )
            for entry, user, team in result.all()
        ],
    )


async def set_top_performer(
    session: AsyncSession,
    auth: AuthContext,
    payload: SetTopPerformerRequest,
) -> TopPerformerListResponse:
    """Place a user at a rank for a month, replacing whoever held it."""
    user = await session.get(User, payload.user_id)
    if user is None:
        raise NotFoundError("User")

    result = await session.execute(
        select(TeamMember).where(col(TeamMember.user_id) == user.id).order_by(col(TeamMember.created_at)).limit(1)
    )
    membership = result.scalar_one_or_none()
    if membership is None:
        raise ValidationError("User must be a member of at least one team")

    await session.execute(
        delete(TopPerformer).where(
            col(TopPerformer.month) == payload.month,
            col(TopPerformer.year) == payload.year,
            col(TopPerformer.rank) == payload.rank,
        )
    )
    entry = TopPerformer(
        user_id=user.id,
        team_id=membership.team_id,
        rank=payload.rank,
        month=payload.month,
        year=payload.year,
    )
    session.add(entry)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.TOP_PERFORMER,
        entity_id=entry.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(entry),
    )

    await session.commit()
    logger.info("Top performer rank %d for %d/%d set to %s", payload.rank, payload.month, payload.year, user.id)
    return await list_top_performers(session, payload.month, payload.year)
