# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from teampulse.api.deps import AdminDep, AuthDep
from teampulse.db import SessionDep
from teampulse.schemas.reward import (
    CreateRewardRequest,
    RewardListResponse,
    RewardResponse,
    SeedRewardsResponse,
    UpdateRewardRequest,
)
from teampulse.seed import seed_wfh_rewards
from teampulse.services import reward as reward_service

rewards_router = APIRouter(prefix="/rewards", tags=["rewards"])


@rewards_router.get(
    "",
    response_model=RewardListResponse,
)
async def list_rewards(session: SessionDep, auth: AuthDep) -> RewardListResponse:
    """List rewards; members only see available ones."""
    return await reward_service.list_rewards(session, auth)


@rewards_router.post(
    "",
    response_model=RewardResponse,
    status_code=201,
)
async def create_reward(
    payload: CreateRewardRequest,
    session: SessionDep,
    auth: AdminDep,
) -> RewardResponse:
    """Create a reward (admin only)."""
    return await reward_service.create_reward(session, auth, payload)


@rewards_router.post(
    "/seed-wfh",
    response_model=SeedRewardsResponse,
)
async def seed_wfh(session: SessionDep, auth: AdminDep) -> SeedRewardsResponse:
    """Create the default WFH rewards if missing (admin only)."""
    return await seed_wfh_rewards(session)


@rewards_router.get(
    "/{reward_id}",
    response_model=RewardResponse,
)
async def get_reward(
    reward_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> RewardResponse:
    """Get a reward (admin only)."""
    return await reward_service.get_reward(session, reward_id)


@rewards_router.put(
    "/{reward_id}",
    response_model=RewardResponse,
)
async def update_reward(
    reward_id: uuid.UUID,
    payload: UpdateRewardRequest,
    session: SessionDep,
    auth: AdminDep,
) -> RewardResponse:
    """Update a reward (admin only)."""
    return await reward_service.update_reward(session, auth, reward_id, payload)


@rewards_router.delete(
    "/{reward_id}",
    status_code=204,
)
async def delete_reward(
    reward_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Delete a reward (admin only)."""
    await reward_service.delete_reward(session, auth, reward_id)
