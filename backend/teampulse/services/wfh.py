"""WFH quota accounting.

A user may flag at most ``team.wfh_limit_per_month`` activity days per team and
calendar month as work-from-home. Each flagged day is backed by exactly one
``WFHRecord``; the enforced count is the number of records for the month.
Bonus quota from activated rewards (``UserWFHQuota``) is reported alongside
usage but never raises the enforced cap.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from teampulse.exceptions import WfhLimitExceeded
from teampulse.models.team import Team
from teampulse.models.wfh import UserWFHQuota, WFHRecord
from teampulse.schemas.team import WfhUsageResponse
from teampulse.services.user import lock_user

if TYPE_CHECKING:
    import datetime
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class WfhChange(enum.StrEnum):
    """Outcome of applying an activity's WFH flag."""

    UNCHANGED = "unchanged"
    ALREADY_RECORDED = "already_recorded"
    RECORDED = "recorded"
    RELEASED = "released"


async def get_team_limit(session: AsyncSession, team_id: uuid.UUID, default_limit: int) -> int:
    """Monthly cap for ``team_id``, or ``default_limit`` when the team does not exist."""
    result = await session.execute(select(Team.wfh_limit_per_month).where(col(Team.id) == team_id))
    limit = result.scalar_one_or_none()
    return default_limit if limit is None else limit


async def count_month_records(
    session: AsyncSession,
    user_id: uuid.UUID,
    team_id: uuid.UUID,
    month: int,
    year: int,
) -> int:
    result = await session.execute(
        select(func.count())
        .select_from(WFHRecord)
        .where(
            col(WFHRecord.user_id) == user_id,
            col(WFHRecord.team_id) == team_id,
            col(WFHRecord.month) == month,
            col(WFHRecord.year) == year,
        )
    )
    return result.scalar_one()


async def _find_day_record(
    session: AsyncSession,
    user_id: uuid.UUID,
    team_id: uuid.UUID,
    day: datetime.date,
) -> WFHRecord | None:
    result = await session.execute(
        select(WFHRecord).where(
            col(WFHRecord.user_id) == user_id,
            col(WFHRecord.team_id) == team_id,
            col(WFHRecord.date) == day,
        )
    )
    return result.scalar_one_or_none()


async def apply_wfh_flag(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    team_id: uuid.UUID,
    activity_date: datetime.date,
    new_is_wfh: bool,
    previous_is_wfh: bool,
    default_limit: int,
) -> WfhChange:
    """Bring the WFH records for one day in line with an activity's flag.

    Changes are staged on ``session``; the caller commits them together with
    its activity write. Raises ``WfhLimitExceeded`` when flagging a new day
    would go past the team's monthly limit.
    """
    if new_is_wfh == previous_is_wfh:
        return WfhChange.UNCHANGED

    # Serializes concurrent WFH changes for the same user on row-locking stores.
    await lock_user(session, user_id)
    existing = await _find_day_record(session, user_id, team_id, activity_date)

    if not new_is_wfh:
        if existing is not None:
            await session.delete(existing)
            await session.flush()
        return WfhChange.RELEASED

    if existing is not None:
        return WfhChange.ALREADY_RECORDED

    used = await count_month_records(session, user_id, team_id, activity_date.month, activity_date.year)
    limit = await get_team_limit(session, team_id, default_limit)
    if used >= limit:
        logger.info("WFH limit reached for user %s in team %s (%d/%d)", user_id, team_id, used, limit)
        raise WfhLimitExceeded(used=used, limit=limit)

    session.add(
        WFHRecord(
            user_id=user_id,
            team_id=team_id,
            date=activity_date,
            month=activity_date.month,
            year=activity_date.year,
        )
    )
    await session.flush()
    return WfhChange.RECORDED


async def get_bonus_quota(session: AsyncSession, user_id: uuid.UUID, month: int, year: int) -> int:
    result = await session.execute(
        select(UserWFHQuota.total_quota).where(
            col(UserWFHQuota.user_id) == user_id,
            col(UserWFHQuota.month) == month,
            col(UserWFHQuota.year) == year,
        )
    )
    return result.scalar_one_or_none() or 0


async def get_wfh_usage(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    team_id: uuid.UUID,
    today: datetime.date,
    default_limit: int,
) -> WfhUsageResponse:
    """Usage of the team allowance for the month containing ``today``."""
    used = await count_month_records(session, user_id, team_id, today.month, today.year)
    limit = await get_team_limit(session, team_id, default_limit)
    return WfhUsageResponse(
        team_id=team_id,
        month=today.month,
        year=today.year,
        used=used,
        limit=limit,
        remaining=max(0, limit - used),
        bonus_quota=await get_bonus_quota(session, user_id, today.month, today.year),
    )


async def add_bonus_quota(
    session: AsyncSession,
    user_id: uuid.UUID,
    month: int,
    year: int,
    days: int,
) -> UserWFHQuota:
    """Add ``days`` to the user's bonus quota for a month, creating the row if needed."""
    result = await session.execute(
        select(UserWFHQuota).where(
            col(UserWFHQuota.user_id) == user_id,
            col(UserWFHQuota.month) == month,
            col(UserWFHQuota.year) == year,
        )
    )
    quota = result.scalar_one_or_none()
    if quota is None:
        quota = UserWFHQuota(user_id=user_id, month=month, year=year, total_quota=0)
        session.add(quota)
    quota.total_quota += days
    await session.flush()
    return quota
