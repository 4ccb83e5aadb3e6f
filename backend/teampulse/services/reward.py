from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import or_, select
from sqlmodel import col

from teampulse.exceptions import NotFoundError
from teampulse.models.enums import AuditAction, AuditEntityType
from teampulse.models.reward import UNLIMITED_QUANTITY, Reward
from teampulse.schemas.reward import RewardListResponse, RewardResponse
from teampulse.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from teampulse.schemas.auth import AuthContext
    from teampulse.schemas.reward import CreateRewardRequest, UpdateRewardRequest

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("name", "points_cost", "quantity", "is_active")


def build_reward_response(reward: Reward) -> RewardResponse:
    return RewardResponse(
        id=reward.id,
        name=reward.name,
        description=reward.description,
        points_cost=reward.points_cost,
        quantity=reward.quantity,
        is_active=reward.is_active,
        expires_at=reward.expires_at,
        created_at=reward.created_at,
    )


async def get_reward_or_404(session: AsyncSession, reward_id: uuid.UUID) -> Reward:
    reward = await session.get(Reward, reward_id)
    if reward is None:
        raise NotFoundError("Reward")
    return reward


async def list_rewards(session: AsyncSession, auth: AuthContext) -> RewardListResponse:
    """Admins see the whole catalog; members see active rewards still in stock."""
    query = select(Reward).order_by(col(Reward.created_at).desc())
    if not auth.is_admin:
        query = query.where(
            col(Reward.is_active).is_(True),
            or_(col(Reward.quantity) == UNLIMITED_QUANTITY, col(Reward.quantity) > 0),
        )
    result = await session.execute(query)
    rewards = list(result.scalars().all())
    return RewardListResponse(items=[build_reward_response(r) for r in rewards], total=len(rewards))


async def get_reward(session: AsyncSession, reward_id: uuid.UUID) -> RewardResponse:
    return build_reward_response(await get_reward_or_404(session, reward_id))


async def create_reward(session: AsyncSession, auth: AuthContext, payload: CreateRewardRequest) -> RewardResponse:
    """Add a reward to the catalog."""
    reward = Reward(**payload.model_dump())
    session.add(reward)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.REWARD,
        entity_id=reward.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(reward),
    )

    await session.commit()
    await session.refresh(reward)
    return build_reward_response(reward)


async def update_reward(
    session: AsyncSession,
    auth: AuthContext,
    reward_id: uuid.UUID,
    payload: UpdateRewardRequest,
) -> RewardResponse:
    """Apply a partial update to a reward."""
    reward = await get_reward_or_404(session, reward_id)
    before = model_to_audit_dict(reward)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(reward, field, value)
    session.add(reward)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.REWARD,
        entity_id=reward.id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=model_to_audit_dict(reward),
    )

    await session.commit()
    await session.refresh(reward)
    return build_reward_response(reward)


async def delete_reward(session: AsyncSession, auth: AuthContext, reward_id: uuid.UUID) -> None:
    """Remove a reward together with its redemptions."""
    reward = await get_reward_or_404(session, reward_id)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.REWARD,
        entity_id=reward.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(reward),
    )

    await session.delete(reward)
    await session.commit()
    logger.info("Reward %s deleted by %s", reward_id, auth.user_id)
