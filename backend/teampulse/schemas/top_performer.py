# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class SetTopPerformerRequest(BaseModel):
    """Request body for placing a user on the monthly leaderboard."""

    user_id: uuid.UUID
    rank: int = Field(ge=1, le=3)
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=9999)


class TopPerformerResponse(BaseModel):
    """Response schema for a leaderboard slot."""

    id: uuid.UUID
    user_id: uuid.UUID
    username: str
    team_id: uuid.UUID
    team_name: str | None
    rank: int
    month: int
    year: int
    created_at: datetime


class TopPerformerListResponse(BaseModel):
    """Leaderboard for one month ordered by rank."""

    month: int
    year: int
    items: list[TopPerformerResponse]
