# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class CreatePokerSessionRequest(BaseModel):
    """Request body for opening an estimation round."""

    story_name: str = Field(min_length=1, max_length=255)
    description: str = ""
    team_id: uuid.UUID | None = None


class PokerVoteRequest(BaseModel):
    """Request body for casting an estimate."""

    points: int = Field(ge=0, le=1000)


class CompletePokerSessionRequest(BaseModel):
    """Request body for closing a session with the agreed estimate."""

    final_points: int | None = Field(default=None, ge=0, le=1000)


class PokerVoteResponse(BaseModel):
    """A participant's vote; ``points`` is hidden until the session is revealed."""

    user_id: uuid.UUID
    username: str
    points: int | None
    has_voted: bool


class PokerSessionResponse(BaseModel):
    """Response schema for a poker session."""

    id: uuid.UUID
    team_id: uuid.UUID
    story_name: str
    description: str
    status: str
    final_points: int | None
    created_at: datetime
    votes: list[PokerVoteResponse] = []


class PokerSessionListResponse(BaseModel):
    """List of poker sessions."""

    items: list[PokerSessionResponse]
    total: int
