# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel, Field, field_validator

from teampulse.models.enums import ActivityStatus

TIME_PATTERN = r"^([0-1]\d|2[0-3]):[0-5]\d$"


class CreateActivityRequest(BaseModel):
    """Request body for logging an activity."""

    date: datetime.date
    time: str | None = Field(default=None, pattern=TIME_PATTERN)
    subject: str = Field(max_length=255)
    description: str
    status: ActivityStatus
    blocked_reason: str | None = None
    is_wfh: bool = False
    team_id: uuid.UUID | None = None
    project: str | None = Field(default=None, max_length=255)

    @field_validator("subject", "description")
    @classmethod
    def check_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            msg = "must not be blank"
            raise ValueError(msg)
        return value


class UpdateActivityRequest(BaseModel):
    """Request body for editing an activity; omitted fields are left unchanged."""

    date: datetime.date | None = None
    time: str | None = Field(default=None, pattern=TIME_PATTERN)
    subject: str | None = Field(default=None, max_length=255)
    description: str | None = None
    status: ActivityStatus | None = None
    blocked_reason: str | None = None
    is_wfh: bool | None = None
    team_id: uuid.UUID | None = None
    project: str | None = Field(default=None, max_length=255)

    @field_validator("subject", "description")
    @classmethod
    def check_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            msg = "must not be blank"
            raise ValueError(msg)
        return value


class ActivityResponse(BaseModel):
    """Response schema for an activity."""

    id: uuid.UUID
    user_id: uuid.UUID
    date: datetime.date
    time: str | None
    subject: str
    description: str
    status: str
    blocked_reason: str | None
    is_wfh: bool
    team_id: uuid.UUID | None
    project: str | None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class ActivityListResponse(BaseModel):
    """List of activities."""

    items: list[ActivityResponse]
    total: int


class TeamMemberSummary(BaseModel):
    """Non-admin member shown alongside a team's activity feed."""

    user_id: uuid.UUID
    username: str
    email: str | None
    role: str
    is_lead: bool


class TeamActivityListResponse(BaseModel):
    """Paginated activity feed for a team."""

    team_id: uuid.UUID
    members: list[TeamMemberSummary]
    items: list[ActivityResponse]
    total: int
    page: int
    limit: int
