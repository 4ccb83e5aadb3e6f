# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

MAX_GRANT = 1000


class GrantPointsRequest(BaseModel):
    """Request body for an admin points award."""

    points: int = Field(ge=1, le=MAX_GRANT)
    description: str | None = Field(default=None, max_length=1000)


class PointsBalanceResponse(BaseModel):
    """A user's current points balance."""

    user_id: uuid.UUID
    username: str
    points: int


class PointTransactionResponse(BaseModel):
    """Response schema for a points grant."""

    id: uuid.UUID
    user_id: uuid.UUID
    admin_id: uuid.UUID
    points: int
    description: str | None
    created_at: datetime


class PointTransactionListResponse(BaseModel):
    """Points grants for a user, newest first."""

    items: list[PointTransactionResponse]
    total: int


class GrantPointsResponse(BaseModel):
    """Outcome of a points grant."""

    balance: PointsBalanceResponse
    transaction: PointTransactionResponse
