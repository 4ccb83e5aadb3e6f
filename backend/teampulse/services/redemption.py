"""Redemption workflow.

State machine::

    (redeem) -> pending -> approved -> completed (owner activates)
                    |          |
                    v          v
                 rejected   rejected

A pending redemption may also be cancelled by its owner, which deletes it.
Points are debited on redeem and refunded exactly once, on rejection from
pending/approved or on cancellation. Finite reward stock moves only on
redeem and cancel.
"""

from __future__ import annotations

import calendar
import logging
import re
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from teampulse.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from teampulse.models.base import as_utc, now_utc
from teampulse.models.enums import AuditAction, AuditEntityType, RedemptionStatus
from teampulse.models.reward import Redemption, Reward
from teampulse.models.user import User
from teampulse.schemas.reward import ActivationResponse, RedemptionListResponse, RedemptionResponse
from teampulse.services.audit import model_to_audit_dict, write_audit_log
from teampulse.services.reward import build_reward_response
from teampulse.services.user import lock_user
from teampulse.services.wfh import add_bonus_quota

if TYPE_CHECKING:
    import uuid
    from datetime import datetime

    from sqlalchemy.ext.asyncio import AsyncSession

    from teampulse.schemas.auth import AuthContext
    from teampulse.schemas.reward import CreateRedemptionRequest, UpdateRedemptionRequest

logger = logging.getLogger(__name__)

REDEMPTION_VALIDITY_MONTHS = 2
_BONUS_DAYS_PATTERN = re.compile(r"\+(\d+)")
_REFUNDABLE = {RedemptionStatus.PENDING, RedemptionStatus.APPROVED}
_DECISION_ACTIONS = {
    RedemptionStatus.APPROVED: AuditAction.APPROVE,
    RedemptionStatus.REJECTED: AuditAction.REJECT,
}


def add_months(value: datetime, months: int) -> datetime:
    """Shift ``value`` by whole calendar months, clamping to the month's last day."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def bonus_days_for(reward_name: str) -> int:
    """Bonus WFH days granted by a reward, taken from a ``+N`` in its name (default 1)."""
    match = _BONUS_DAYS_PATTERN.search(reward_name)
    return int(match.group(1)) if match else 1


def is_wfh_reward(reward_name: str) -> bool:
    return "wfh" in reward_name.lower()


def _build_redemption_response(
    redemption: Redemption,
    reward: Reward,
    username: str | None = None,
) -> RedemptionResponse:
    return RedemptionResponse(
        id=redemption.id,
        user_id=redemption.user_id,
        username=username,
        reward=build_reward_response(reward),
        status=redemption.status,
        is_activated=redemption.is_activated,
        activated_at=redemption.activated_at,
        expires_at=redemption.expires_at,
        created_at=redemption.created_at,
    )


async def _lock_reward(session: AsyncSession, reward_id: uuid.UUID) -> Reward:
    result = await session.execute(select(Reward).where(col(Reward.id) == reward_id).with_for_update())
    reward = result.scalar_one_or_none()
    if reward is None:
        raise NotFoundError("Reward")
    return reward


async def _get_redemption_or_404(session: AsyncSession, redemption_id: uuid.UUID) -> Redemption:
    result = await session.execute(
        select(Redemption).where(col(Redemption.id) == redemption_id).with_for_update()
    )
    redemption = result.scalar_one_or_none()
    if redemption is None:
        raise NotFoundError("Redemption")
    return redemption


async def create_redemption(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateRedemptionRequest,
) -> RedemptionResponse:
    """Redeem a reward: debit points, take one unit of stock, open a pending request."""
    reward = await _lock_reward(session, payload.reward_id)
    if not reward.is_active:
        raise ValidationError("Reward is no longer available")
    if reward.expires_at is not None and as_utc(reward.expires_at) <= now_utc():
        raise ValidationError("Reward has expired")

    user = await lock_user(session, auth.user_id)
    if user.points < reward.points_cost:
        raise ValidationError(f"Insufficient points. You need {reward.points_cost} but have {user.points}")
    if not reward.is_unlimited and reward.quantity <= 0:
        raise ValidationError("Reward is out of stock")

    user.points -= reward.points_cost
    if not reward.is_unlimited:
        reward.quantity -= 1

    created_at = now_utc()
    redemption = Redemption(
        user_id=user.id,
        reward_id=reward.id,
        status=RedemptionStatus.PENDING,
        created_at=created_at,
        expires_at=add_months(created_at, REDEMPTION_VALIDITY_MONTHS),
    )
    session.add_all([user, reward, redemption])

    await session.commit()
    await session.refresh(redemption)
    logger.info("User %s redeemed reward %s for %d points", user.id, reward.id, reward.points_cost)
    return _build_redemption_response(redemption, reward, user.username)


async def list_redemptions(
    session: AsyncSession,
    auth: AuthContext,
    personal: bool = False,
    status: RedemptionStatus | None = None,
) -> RedemptionListResponse:
    """Admins see every redemption unless ``personal``; members see their own."""
    query = (
        select(Redemption, Reward, User)
        .join(Reward, col(Reward.id) == col(Redemption.reward_id))
        .join(User, col(User.id) == col(Redemption.user_id))
        .order_by(col(Redemption.created_at).desc())
    )
    if personal or not auth.is_admin:
        query = query.where(col(Redemption.user_id) == auth.user_id)
    if status is not None:
        query = query.where(col(Redemption.status) == status)

    result = await session.execute(query)
    rows = result.all()
    return RedemptionListResponse(
        items=[_build_redemption_response(r, reward, user.username) for r, reward, user in rows],
        total=len(rows),
    )


async def update_redemption_status(
    session: AsyncSession,
    auth: AuthContext,
    redemption_id: uuid.UUID,
    payload: UpdateRedemptionRequest,
) -> RedemptionResponse:
    """Admin decision on a redemption.

    Rejecting a pending or approved redemption refunds its reward's cost.
    No other transition touches points, and rejection does not restore stock.
    """
    redemption = await _get_redemption_or_404(session, redemption_id)
    reward = await session.get(Reward, redemption.reward_id)
    if reward is None:
        raise NotFoundError("Reward")

    before = model_to_audit_dict(redemption)
    previous = RedemptionStatus(redemption.status)
    target = payload.status

    if target == RedemptionStatus.REJECTED and previous in _REFUNDABLE:
        user = await lock_user(session, redemption.user_id)
        user.points += reward.points_cost
        session.add(user)
        logger.info("Refunded %d points to %s for redemption %s", reward.points_cost, user.id, redemption.id)

    redemption.status = target
    session.add(redemption)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.REDEMPTION,
        entity_id=redemption.id,
        action=_DECISION_ACTIONS.get(target, AuditAction.UPDATE),
        before_json=before,
        after_json=model_to_audit_dict(redemption),
    )

    await session.commit()
    await session.refresh(redemption)
    logger.info("Redemption %s moved %s -> %s by %s", redemption.id, previous, target, auth.user_id)
    return _build_redemption_response(redemption, reward)


async def cancel_redemption(session: AsyncSession, auth: AuthContext, redemption_id: uuid.UUID) -> None:
    """Withdraw a pending redemption, refunding points and returning stock."""
    redemption = await _get_redemption_or_404(session, redemption_id)
    if redemption.user_id != auth.user_id and not auth.is_admin:
        raise AuthorizationError("You can only cancel your own redemptions")
    if redemption.status != RedemptionStatus.PENDING:
        raise ValidationError("Can only cancel pending redemptions")

    reward = await _lock_reward(session, redemption.reward_id)
    user = await lock_user(session, redemption.user_id)

    user.points += reward.points_cost
    if not reward.is_unlimited:
        reward.quantity += 1
    session.add_all([user, reward])

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.REDEMPTION,
        entity_id=redemption.id,
        action=AuditAction.CANCEL,
        before_json=model_to_audit_dict(redemption),
    )

    await session.delete(redemption)
    await session.commit()
    logger.info("Redemption %s cancelled by %s", redemption_id, auth.user_id)


async def activate_redemption(
    session: AsyncSession,
    auth: AuthContext,
    redemption_id: uuid.UUID,
) -> ActivationResponse:
    """Use an approved WFH reward, crediting bonus WFH days for the current month."""
    redemption = await _get_redemption_or_404(session, redemption_id)
    if redemption.user_id != auth.user_id:
        raise AuthorizationError("You can only activate your own rewards")
    if redemption.is_activated:
        raise ConflictError("Reward already activated")
    if redemption.status != RedemptionStatus.APPROVED:
        raise ValidationError("Reward must be approved before activation")

    reward = await session.get(Reward, redemption.reward_id)
    if reward is None:
        raise NotFoundError("Reward")
    if not is_wfh_reward(reward.name):
        raise ValidationError("This reward type cannot be activated")

    before = model_to_audit_dict(redemption)
    now = now_utc()
    days = bonus_days_for(reward.name)
    quota = await add_bonus_quota(session, redemption.user_id, now.month, now.year, days)

    redemption.is_activated = True
    redemption.activated_at = now
    redemption.status = RedemptionStatus.COMPLETED
    session.add(redemption)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.REDEMPTION,
        entity_id=redemption.id,
        action=AuditAction.ACTIVATE,
        before_json=before,
        after_json=model_to_audit_dict(redemption),
    )

    await session.commit()
    await session.refresh(redemption)
    await session.refresh(quota)
    logger.info("Redemption %s activated: +%d WFH days for %d/%d", redemption.id, days, now.month, now.year)
    return ActivationResponse(
        redemption=_build_redemption_response(redemption, reward),
        bonus_days=days,
        month=now.month,
        year=now.year,
        total_quota=quota.total_quota,
    )
