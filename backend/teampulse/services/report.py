"""Reporting service: team activity rollups, system overview and audit log queries."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from teampulse.exceptions import AuthorizationError
from teampulse.models.activity import Activity
from teampulse.models.audit import AuditLog
from teampulse.models.base import now_utc
from teampulse.models.enums import ActivityStatus, PokerStatus, TeamRole, UserRole
from teampulse.models.poker import PokerSession
from teampulse.models.team import Team, TeamMember
from teampulse.models.user import User
from teampulse.models.wfh import WFHRecord
from teampulse.schemas.report import (
    AuditLogEntryResponse,
    AuditLogListResponse,
    MemberActivityReport,
    MemberActivityStats,
    SystemReportResponse,
    SystemStats,
    TeamActivityReportResponse,
    TeamActivitySummary,
    TeamSystemStats,
)
from teampulse.services.team import get_membership, get_team_or_404

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from teampulse.schemas.auth import AuthContext


def _rate(done: int, total: int) -> float:
    return round(done / total * 100, 1) if total else 0.0


async def _require_team_lead(session: AsyncSession, auth: AuthContext, team_id: uuid.UUID) -> None:
    """Admins and team leads may read reports; team admins who are not leads may not."""
    if auth.is_admin:
        return
    membership = await get_membership(session, auth.user_id, team_id)
    if membership is None or not membership.is_lead or membership.role == TeamRole.TEAM_ADMIN:
        raise AuthorizationError("Only team leads and admins can view activity reports")


async def team_activity_report(
    session: AsyncSession,
    auth: AuthContext,
    team_id: uuid.UUID,
    start_date: date | None = None,
    end_date: date | None = None,
    member_id: uuid.UUID | None = None,
) -> TeamActivityReportResponse:
    """Per-member activity and WFH rollup for a team, excluding admin users."""
    await _require_team_lead(session, auth, team_id)
    team = await get_team_or_404(session, team_id)

    member_rows = await session.execute(
        select(TeamMember, User)
        .join(User, col(User.id) == col(TeamMember.user_id))
        .where(col(TeamMember.team_id) == team_id, col(User.role) != UserRole.ADMIN)
        .order_by(col(User.username))
    )
    members = member_rows.all()
    member_ids = [user.id for _, user in members]
    if member_id is not None:
        member_ids = [m for m in member_ids if m == member_id]

    activity_filter = [col(Activity.user_id).in_(member_ids)]
    wfh_filter = [col(WFHRecord.team_id) == team_id, col(WFHRecord.user_id).in_(member_ids)]
    if start_date is not None:
        activity_filter.append(col(Activity.date) >= start_date)
        wfh_filter.append(col(WFHRecord.date) >= start_date)
    if end_date is not None:
        activity_filter.append(col(Activity.date) <= end_date)
        wfh_filter.append(col(WFHRecord.date) <= end_date)

    activities = list(
        (await session.execute(select(Activity).where(*activity_filter).order_by(col(Activity.date).desc())))
        .scalars()
        .all()
    )
    wfh_days = Counter(
        (await session.execute(select(WFHRecord.user_id).where(*wfh_filter))).scalars().all()
    )

    reports: list[MemberActivityReport] = []
    for membership, user in members:
        if user.id not in member_ids:
            continue
        own = [a for a in activities if a.user_id == user.id]
        statuses = Counter(a.status for a in own)
        reports.append(
            MemberActivityReport(
                user_id=user.id,
                username=user.username,
                email=user.email,
                role=membership.role,
                is_lead=membership.is_lead,
                last_activity_date=own[0].date if own else None,
                stats=MemberActivityStats(
                    total_activities=len(own),
                    completed_tasks=statuses[ActivityStatus.DONE],
                    in_progress_tasks=statuses[ActivityStatus.IN_PROGRESS],
                    blocked_tasks=statuses[ActivityStatus.BLOCKED],
                    wfh_days=wfh_days[user.id],
                    completion_rate=_rate(statuses[ActivityStatus.DONE], len(own)),
                ),
            )
        )

    completed = sum(1 for a in activities if a.status == ActivityStatus.DONE)
    return TeamActivityReportResponse(
        team_id=team.id,
        team_name=team.name,
        wfh_limit_per_month=team.wfh_limit_per_month,
        start_date=start_date,
        end_date=end_date,
        members=reports,
        summary=TeamActivitySummary(
            total_members=len(reports),
            total_activities=len(activities),
            completed_activities=completed,
            total_wfh_days=sum(wfh_days.values()),
            average_completion_rate=_rate(completed, len(activities)),
        ),
    )


async def system_report(
    session: AsyncSession,
    start_date: date | None = None,
    end_date: date | None = None,
) -> SystemReportResponse:
    """Organisation-wide activity, WFH and poker totals with a per-team breakdown."""
    teams = list((await session.execute(select(Team).order_by(col(Team.name)))).scalars().all())
    memberships = (
        await session.execute(
            select(TeamMember.team_id, TeamMember.user_id, User.role).join(
                User, col(User.id) == col(TeamMember.user_id)
            )
        )
    ).all()

    activity_filter = []
    if start_date is not None:
        activity_filter.append(col(Activity.date) >= start_date)
    if end_date is not None:
        activity_filter.append(col(Activity.date) <= end_date)
    activities = (await session.execute(select(Activity.user_id, Activity.status).where(*activity_filter))).all()
    wfh_records = (await session.execute(select(WFHRecord.user_id, WFHRecord.team_id))).all()
    pokers = (await session.execute(select(PokerSession.team_id, PokerSession.status))).all()

    team_stats: list[TeamSystemStats] = []
    for team in teams:
        user_ids = {m.user_id for m in memberships if m.team_id == team.id}
        own = [a for a in activities if a.user_id in user_ids]
        done = sum(1 for a in own if a.status == ActivityStatus.DONE)
        team_pokers = [p for p in pokers if p.team_id == team.id]
        team_stats.append(
            TeamSystemStats(
                team_id=team.id,
                team_name=team.name,
                member_count=sum(1 for m in memberships if m.team_id == team.id and m.role != UserRole.ADMIN),
                total_activities=len(own),
                completed_activities=done,
                completion_rate=_rate(done, len(own)),
                blocked_tasks=sum(1 for a in own if a.status == ActivityStatus.BLOCKED),
                wfh_days=sum(1 for w in wfh_records if w.team_id == team.id),
                poker_sessions=len(team_pokers),
                completed_poker_sessions=sum(1 for p in team_pokers if p.status == PokerStatus.COMPLETED),
            )
        )
    team_stats.sort(key=lambda t: t.total_activities, reverse=True)

    completed = sum(1 for a in activities if a.status == ActivityStatus.DONE)
    return SystemReportResponse(
        generated_at=now_utc(),
        system=SystemStats(
            total_teams=len(teams),
            total_members=len(memberships),
            total_activities=len(activities),
            completed_activities=completed,
            completion_rate=_rate(completed, len(activities)),
            total_wfh_days=len(wfh_records),
            total_poker_sessions=len(pokers),
        ),
        teams=team_stats,
    )


async def query_audit_log(
    session: AsyncSession,
    *,
    entity_type: str | None = None,
    action: str | None = None,
    actor_id: uuid.UUID | None = None,
    entity_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 50,
) -> AuditLogListResponse:
    """Query audit log entries with optional filters."""
    filters = []
    if entity_type is not None:
        filters.append(col(AuditLog.entity_type) == entity_type)
    if action is not None:
        filters.append(col(AuditLog.action) == action)
    if actor_id is not None:
        filters.append(col(AuditLog.actor_id) == actor_id)
    if entity_id is not None:
        filters.append(col(AuditLog.entity_id) == entity_id)

    count_result = await session.execute(select(func.count()).select_from(AuditLog).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(AuditLog).where(*filters).order_by(col(AuditLog.created_at).desc()).offset(offset).limit(limit)
    )
    entries = list(result.scalars().all())

    return AuditLogListResponse(
        items=[
            AuditLogEntryResponse(
                id=e.id,
                actor_id=e.actor_id,
                entity_type=e.entity_type,
                entity_id=e.entity_id,
                action=e.action,
                before_json=e.before_json,
                after_json=e.after_json,
                created_at=e.created_at,
            )
            for e in entries
        ],
        total=total,
    )
