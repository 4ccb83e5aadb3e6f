from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from teampulse.exceptions import AuthorizationError, FieldError, NotFoundError, ValidationError, WfhLimitExceeded
from teampulse.models.activity import Activity
from teampulse.models.enums import UserRole
from teampulse.models.team import TeamMember
from teampulse.models.user import User
from teampulse.schemas.activity import (
    ActivityListResponse,
    ActivityResponse,
    TeamActivityListResponse,
    TeamMemberSummary,
)
from teampulse.services.team import get_team_or_404, require_team_manager
from teampulse.services.wfh import WfhChange, apply_wfh_flag

if TYPE_CHECKING:
    import datetime
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from teampulse.schemas.activity import CreateActivityRequest, UpdateActivityRequest
    from teampulse.schemas.auth import AuthContext

logger = logging.getLogger(__name__)

_TEAM_REQUIRED = "team_id is required when is_wfh is true"
_REQUIRED_FIELDS = ("date", "subject", "description", "status", "is_wfh")


def _build_activity_response(activity: Activity) -> ActivityResponse:
    return ActivityResponse(
        id=activity.id,
        user_id=activity.user_id,
        date=activity.date,
        time=activity.time,
        subject=activity.subject,
        description=activity.description,
        status=activity.status,
        blocked_reason=activity.blocked_reason,
        is_wfh=activity.is_wfh,
        team_id=activity.team_id,
        project=activity.project,
        created_at=activity.created_at,
        updated_at=activity.updated_at,
    )


def _team_required() -> ValidationError:
    return ValidationError("Validation failed", details=[FieldError(field="team_id", message=_TEAM_REQUIRED)])


async def _get_owned_activity(session: AsyncSession, auth: AuthContext, activity_id: uuid.UUID) -> Activity:
    activity = await session.get(Activity, activity_id)
    if activity is None:
        raise NotFoundError("Activity")
    if activity.user_id != auth.user_id and not auth.is_admin:
        raise AuthorizationError("You can only modify your own activities")
    return activity


async def create_activity(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateActivityRequest,
    default_wfh_limit: int,
) -> ActivityResponse:
    """Log an activity, claiming a WFH day first when it is flagged.

    A rejected WFH claim leaves nothing behind: neither the activity nor a
    WFH record is written.
    """
    if payload.is_wfh and payload.team_id is None:
        raise _team_required()

    if payload.is_wfh and payload.team_id is not None:
        await apply_wfh_flag(
            session,
            user_id=auth.user_id,
            team_id=payload.team_id,
            activity_date=payload.date,
            new_is_wfh=True,
            previous_is_wfh=False,
            default_limit=default_wfh_limit,
        )

    activity = Activity(
        user_id=auth.user_id,
        date=payload.date,
        time=payload.time,
        subject=payload.subject,
        description=payload.description,
        status=payload.status,
        blocked_reason=payload.blocked_reason,
        is_wfh=payload.is_wfh,
        team_id=payload.team_id,
        project=payload.project,
    )
    session.add(activity)

    await session.commit()
    await session.refresh(activity)
    return _build_activity_response(activity)


async def get_activity(session: AsyncSession, auth: AuthContext, activity_id: uuid.UUID) -> ActivityResponse:
    activity = await session.get(Activity, activity_id)
    if activity is None:
        raise NotFoundError("Activity")
    return _build_activity_response(activity)


async def list_activities(
    session: AsyncSession,
    auth: AuthContext,
    user_id: uuid.UUID | None = None,
    start_date: datetime.date | None = None,
    end_date: datetime.date | None = None,
) -> ActivityListResponse:
    """List activities newest first, defaulting to the caller's own."""
    filters = [col(Activity.user_id) == (user_id or auth.user_id)]
    if start_date is not None:
        filters.append(col(Activity.date) >= start_date)
    if end_date is not None:
        filters.append(col(Activity.date) <= end_date)

    result = await session.execute(
        select(Activity).where(*filters).order_by(col(Activity.date).desc(), col(Activity.created_at).desc())
    )
    activities = list(result.scalars().all())
    return ActivityListResponse(
        items=[_build_activity_response(a) for a in activities],
        total=len(activities),
    )


async def update_activity(
    session: AsyncSession,
    auth: AuthContext,
    activity_id: uuid.UUID,
    payload: UpdateActivityRequest,
    default_wfh_limit: int,
) -> ActivityResponse:
    """Edit an activity and keep its WFH record in step with ``is_wfh``.

    When a WFH activity moves to another date or team, the record for the
    stored (date, team) is released and a new one is claimed for the new pair,
    subject to the monthly limit. The bookkeeping is done for the owner.
    """
    activity = await _get_owned_activity(session, auth, activity_id)
    updates = payload.model_dump(exclude_unset=True)
    for field in _REQUIRED_FIELDS:
        if field in updates and updates[field] is None:
            del updates[field]

    new_is_wfh = updates.get("is_wfh", activity.is_wfh)
    new_date = updates.get("date", activity.date)
    new_team_id = updates.get("team_id", activity.team_id)
    moved = new_date != activity.date or new_team_id != activity.team_id

    if new_is_wfh and new_team_id is None:
        raise _team_required()

    if activity.is_wfh and activity.team_id is not None and (not new_is_wfh or moved):
        await apply_wfh_flag(
            session,
            user_id=activity.user_id,
            team_id=activity.team_id,
            activity_date=activity.date,
            new_is_wfh=False,
            previous_is_wfh=True,
            default_limit=default_wfh_limit,
        )

    if new_is_wfh and new_team_id is not None and (not activity.is_wfh or moved):
        try:
            change = await apply_wfh_flag(
                session,
                user_id=activity.user_id,
                team_id=new_team_id,
                activity_date=new_date,
                new_is_wfh=True,
                previous_is_wfh=False,
                default_limit=default_wfh_limit,
            )
        except WfhLimitExceeded:
            await session.rollback()
            raise
        logger.debug("Activity %s WFH change: %s", activity.id, change)

    for field, value in updates.items():
        setattr(activity, field, value)
    session.add(activity)

    await session.commit()
    await session.refresh(activity)
    return _build_activity_response(activity)


async def delete_activity(session: AsyncSession, auth: AuthContext, activity_id: uuid.UUID) -> None:
    """Hard-delete an activity. Any WFH record for its day is kept."""
    activity = await _get_owned_activity(session, auth, activity_id)
    await session.delete(activity)
    await session.commit()


async def list_team_activities(
    session: AsyncSession,
    auth: AuthContext,
    team_id: uuid.UUID,
    day: datetime.date | None = None,
    start_date: datetime.date | None = None,
    end_date: datetime.date | None = None,
    member_id: uuid.UUID | None = None,
    page: int = 1,
    limit: int = 20,
) -> TeamActivityListResponse:
    """Activity feed of a team's non-admin members for leads, team admins and admins."""
    await get_team_or_404(session, team_id)
    await require_team_manager(session, auth, team_id)

    member_rows = await session.execute(
        select(TeamMember, User)
        .join(User, col(User.id) == col(TeamMember.user_id))
        .where(col(TeamMember.team_id) == team_id, col(User.role) != UserRole.ADMIN)
        .order_by(col(User.username))
    )
    members = [
        TeamMemberSummary(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=membership.role,
            is_lead=membership.is_lead,
        )
        for membership, user in member_rows.all()
    ]
    member_ids = [m.user_id for m in members]
    if member_id is not None:
        member_ids = [m for m in member_ids if m == member_id]

    filters = [col(Activity.user_id).in_(member_ids)]
    if day is not None:
        filters.append(col(Activity.date) == day)
    else:
        if start_date is not None:
            filters.append(col(Activity.date) >= start_date)
        if end_date is not None:
            filters.append(col(Activity.date) <= end_date)

    count_result = await session.execute(select(func.count()).select_from(Activity).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(Activity)
        .where(*filters)
        .order_by(col(Activity.date).desc(), col(Activity.created_at).desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return TeamActivityListResponse(
        team_id=team_id,
        members=members,
        items=[_build_activity_response(a) for a in result.scalars().all()],
        total=total,
        page=page,
        limit=limit,
    )
