# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel


class AuditLogEntryResponse(BaseModel):
    """Response schema for a single audit log entry."""

    id: uuid.UUID
    actor_id: uuid.UUID
    entity_type: str
    entity_id: uuid.UUID
    action: str
    before_json: dict[str, Any] | None
    after_json: dict[str, Any] | None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    """Paginated list of audit log entries."""

    items: list[AuditLogEntryResponse]
    total: int


class MemberActivityStats(BaseModel):
    total_activities: int
    completed_tasks: int
    in_progress_tasks: int
    blocked_tasks: int
    wfh_days: int
    completion_rate: float


class MemberActivityReport(BaseModel):
    """Per-member rollup in a team activity report."""

    user_id: uuid.UUID
    username: str
    email: str | None
    role: str
    is_lead: bool
    last_activity_date: date | None
    stats: MemberActivityStats


class TeamActivitySummary(BaseModel):
    total_members: int
    total_activities: int
    completed_activities: int
    total_wfh_days: int
    average_completion_rate: float


class TeamActivityReportResponse(BaseModel):
    """Activity and WFH rollup for one team."""

    team_id: uuid.UUID
    team_name: str
    wfh_limit_per_month: int
    start_date: date | None
    end_date: date | None
    members: list[MemberActivityReport]
    summary: TeamActivitySummary


class TeamSystemStats(BaseModel):
    team_id: uuid.UUID
    team_name: str
    member_count: int
    total_activities: int
    completed_activities: int
    completion_rate: float
    blocked_tasks: int
    wfh_days: int
    poker_sessions: int
    completed_poker_sessions: int


class SystemStats(BaseModel):
    total_teams: int
    total_members: int
    total_activities: int
    completed_activities: int
    completion_rate: float
    total_wfh_days: int
    total_poker_sessions: int


class SystemReportResponse(BaseModel):
    """Organisation-wide rollup, teams ordered by activity volume."""

    generated_at: datetime
    system: SystemStats
    teams: list[TeamSystemStats]
