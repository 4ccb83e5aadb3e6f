# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query

from teampulse.api.deps import AdminDep, AuthDep
from teampulse.db import SessionDep
from teampulse.schemas.report import AuditLogListResponse, SystemReportResponse, TeamActivityReportResponse
from teampulse.services import report as report_service

reports_router = APIRouter(prefix="/reports", tags=["reports"])


@reports_router.get(
    "/teams/{team_id}/activity",
    response_model=TeamActivityReportResponse,
)
async def team_activity_report(
    team_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    member_id: uuid.UUID | None = Query(default=None),
) -> TeamActivityReportResponse:
    """Activity and WFH rollup for a team (team leads and admins)."""
    return await report_service.team_activity_report(session, auth, team_id, start_date, end_date, member_id)


@reports_router.get(
    "/system",
    response_model=SystemReportResponse,
)
async def system_report(
    session: SessionDep,
    auth: AdminDep,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> SystemReportResponse:
    """Organisation-wide report (admin only)."""
    return await report_service.system_report(session, start_date, end_date)


@reports_router.get(
    "/audit-log",
    response_model=AuditLogListResponse,
)
async def query_audit_log(
    session: SessionDep,
    auth: AdminDep,
    entity_type: str | None = Query(default=None),
    action: str | None = Query(default=None),
    actor_id: uuid.UUID | None = Query(default=None),
    entity_id: uuid.UUID | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> AuditLogListResponse:
    """Query audit log entries with optional filters (admin only)."""
    return await report_service.query_audit_log(
        session,
        entity_type=entity_type,
        action=action,
        actor_id=actor_id,
        entity_id=entity_id,
        offset=offset,
        limit=limit,
    )
