from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from teampulse.exceptions import AuthorizationError, ConflictError, NotFoundError
from teampulse.models.enums import AuditAction, AuditEntityType, TeamRole
from teampulse.models.team import Team, TeamMember
from teampulse.models.user import User
from teampulse.schemas.team import (
    TeamListResponse,
    TeamMemberResponse,
    TeamResponse,
    TeamWfhConfigResponse,
)
from teampulse.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from teampulse.schemas.auth import AuthContext
    from teampulse.schemas.team import AddMemberRequest, CreateTeamRequest, UpdateWfhLimitRequest

logger = logging.getLogger(__name__)


def _build_team_response(team: Team, membership: TeamMember | None = None) -> TeamResponse:
    return TeamResponse(
        id=team.id,
        name=team.name,
        description=team.description,
        wfh_limit_per_month=team.wfh_limit_per_month,
        created_at=team.created_at,
        role=membership.role if membership else None,
        is_lead=membership.is_lead if membership else None,
    )


def _build_member_response(member: TeamMember) -> TeamMemberResponse:
    return TeamMemberResponse(
        id=member.id,
        team_id=member.team_id,
        user_id=member.user_id,
        role=member.role,
        is_lead=member.is_lead,
    )


async def get_team_or_404(session: AsyncSession, team_id: uuid.UUID) -> Team:
    team = await session.get(Team, team_id)
    if team is None:
        raise NotFoundError("Team")
    return team


async def get_membership(session: AsyncSession, user_id: uuid.UUID, team_id: uuid.UUID) -> TeamMember | None:
    result = await session.execute(
        select(TeamMember).where(col(TeamMember.user_id) == user_id, col(TeamMember.team_id) == team_id)
    )
    return result.scalar_one_or_none()


async def require_team_manager(session: AsyncSession, auth: AuthContext, team_id: uuid.UUID) -> None:
    """Allow admins, the team's leads and its team admins."""
    if auth.is_admin:
        return
    membership = await get_membership(session, auth.user_id, team_id)
    if membership is None or not (membership.is_lead or membership.role == TeamRole.TEAM_ADMIN):
        raise AuthorizationError("You do not have permission to manage this team")


async def create_team(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateTeamRequest,
    default_wfh_limit: int,
) -> TeamResponse:
    """Create a team and make the creator its team admin."""
    team = Team(
        name=payload.name,
        description=payload.description,
        wfh_limit_per_month=(
            default_wfh_limit if payload.wfh_limit_per_month is None else payload.wfh_limit_per_month
        ),
    )
    session.add(team)
    await session.flush()

    membership = TeamMember(user_id=auth.user_id, team_id=team.id, role=TeamRole.TEAM_ADMIN)
    session.add(membership)

    await session.commit()
    await session.refresh(team)
    await session.refresh(membership)
    logger.info("Team %s created by %s", team.id, auth.user_id)
    return _build_team_response(team, membership)


async def list_my_teams(session: AsyncSession, auth: AuthContext) -> TeamListResponse:
    """List teams the caller belongs to with the caller's role in each."""
    result = await session.execute(
        select(Team, TeamMember)
        .join(TeamMember, col(TeamMember.team_id) == col(Team.id))
        .where(col(TeamMember.user_id) == auth.user_id)
        .order_by(col(Team.name))
    )
    rows = result.all()
    return TeamListResponse(
        items=[_build_team_response(team, membership) for team, membership in rows],
        total=len(rows),
    )


async def add_member(
    session: AsyncSession,
    auth: AuthContext,
    team_id: uuid.UUID,
    payload: AddMemberRequest,
) -> TeamMemberResponse:
    """Add a user to a team."""
    await get_team_or_404(session, team_id)
    await require_team_manager(session, auth, team_id)

    if await session.get(User, payload.user_id) is None:
        raise NotFoundError("User")
    if await get_membership(session, payload.user_id, team_id) is not None:
        raise ConflictError("User is already a member of this team")

    member = TeamMember(
        user_id=payload.user_id,
        team_id=team_id,
        role=payload.role,
        is_lead=payload.is_lead,
    )
    session.add(member)
    await session.commit()
    await session.refresh(member)
    return _build_member_response(member)


async def remove_member(
    session: AsyncSession,
    auth: AuthContext,
    team_id: uuid.UUID,
    member_id: uuid.UUID,
) -> None:
    """Remove a membership by id."""
    await require_team_manager(session, auth, team_id)

    result = await session.execute(
        select(TeamMember).where(col(TeamMember.id) == member_id, col(TeamMember.team_id) == team_id)
    )
    member = result.scalar_one_or_none()
    if member is None:
        raise NotFoundError("Team member")

    await session.delete(member)
    await session.commit()


async def get_wfh_config(session: AsyncSession, team_id: uuid.UUID) -> TeamWfhConfigResponse:
    team = await get_team_or_404(session, team_id)
    return TeamWfhConfigResponse(team_id=team.id, name=team.name, wfh_limit_per_month=team.wfh_limit_per_month)


async def update_wfh_limit(
    session: AsyncSession,
    auth: AuthContext,
    team_id: uuid.UUID,
    payload: UpdateWfhLimitRequest,
) -> TeamWfhConfigResponse:
    """Change a team's monthly WFH limit.

    Any authenticated user may do this. Existing WFH records are kept even
    when they now exceed the lower limit.
    """
    team = await get_team_or_404(session, team_id)
    before = model_to_audit_dict(team)

    team.wfh_limit_per_month = payload.wfh_limit_per_month
    session.add(team)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.TEAM,
        entity_id=team.id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=model_to_audit_dict(team),
    )

    await session.commit()
    await session.refresh(team)
    logger.info("Team %s WFH limit set to %d by %s", team.id, team.wfh_limit_per_month, auth.user_id)
    return TeamWfhConfigResponse(team_id=team.id, name=team.name, wfh_limit_per_month=team.wfh_limit_per_month)
