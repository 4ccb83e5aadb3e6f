# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from teampulse.models.enums import RedemptionStatus


class CreateRewardRequest(BaseModel):
    """Request body for adding a catalog reward."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    points_cost: int = Field(ge=1)
    quantity: int = Field(default=-1, ge=-1)
    is_active: bool = True
    expires_at: datetime | None = None


class UpdateRewardRequest(BaseModel):
    """Request body for editing a reward; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    points_cost: int | None = Field(default=None, ge=1)
    quantity: int | None = Field(default=None, ge=-1)
    is_active: bool | None = None
    expires_at: datetime | None = None


class RewardResponse(BaseModel):
    """Response schema for a reward."""

    id: uuid.UUID
    name: str
    description: str | None
    points_cost: int
    quantity: int
    is_active: bool
    expires_at: datetime | None
    created_at: datetime


class RewardListResponse(BaseModel):
    """List of rewards."""

    items: list[RewardResponse]
    total: int


class SeedRewardsResponse(BaseModel):
    """Outcome of seeding the default WFH rewards."""

    created: list[str]
    skipped: list[str]


class CreateRedemptionRequest(BaseModel):
    """Request body for redeeming a reward."""

    reward_id: uuid.UUID


class UpdateRedemptionRequest(BaseModel):
    """Request body for an admin status decision."""

    status: RedemptionStatus


class RedemptionResponse(BaseModel):
    """Response schema for a redemption."""

    id: uuid.UUID
    user_id: uuid.UUID
    username: str | None = None
    reward: RewardResponse
    status: str
    is_activated: bool
    activated_at: datetime | None
    expires_at: datetime | None
    created_at: datetime


class RedemptionListResponse(BaseModel):
    """List of redemptions."""

    items: list[RedemptionResponse]
    total: int


class ActivationResponse(BaseModel):
    """Result of activating a WFH reward."""

    redemption: RedemptionResponse
    bonus_days: int
    month: int
    year: int
    total_quota: int
