# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from teampulse.models.enums import TeamRole


class CreateTeamRequest(BaseModel):
    """Request body for creating a team."""

    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    wfh_limit_per_month: int | None = Field(default=None, ge=0, le=31)


class TeamResponse(BaseModel):
    """Response schema for a team, with the caller's membership when listed."""

    id: uuid.UUID
    name: str
    description: str | None
    wfh_limit_per_month: int
    created_at: datetime
    role: str | None = None
    is_lead: bool | None = None


class TeamListResponse(BaseModel):
    """List of teams."""

    items: list[TeamResponse]
    total: int


class AddMemberRequest(BaseModel):
    """Request body for adding a user to a team."""

    user_id: uuid.UUID
    role: TeamRole = TeamRole.MEMBER
    is_lead: bool = False


class TeamMemberResponse(BaseModel):
    """Response schema for a team membership."""

    id: uuid.UUID
    team_id: uuid.UUID
    user_id: uuid.UUID
    role: str
    is_lead: bool


class UpdateWfhLimitRequest(BaseModel):
    """Request body for changing a team's monthly WFH allowance."""

    wfh_limit_per_month: int = Field(ge=0, le=31)


class TeamWfhConfigResponse(BaseModel):
    """A team's WFH configuration."""

    team_id: uuid.UUID
    name: str
    wfh_limit_per_month: int


class WfhUsageResponse(BaseModel):
    """A user's WFH consumption for one team and month."""

    team_id: uuid.UUID
    month: int
    year: int
    used: int
    limit: int
    remaining: int
    bonus_quota: int
