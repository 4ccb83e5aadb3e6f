# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import datetime
import uuid

from fastapi import APIRouter, Query

from teampulse.api.deps import AuthDep, SettingsDep
from teampulse.db import SessionDep
from teampulse.models.base import now_utc
from teampulse.schemas.activity import TeamActivityListResponse
from teampulse.schemas.team import (
    AddMemberRequest,
    CreateTeamRequest,
    TeamListResponse,
    TeamMemberResponse,
    TeamResponse,
    TeamWfhConfigResponse,
    UpdateWfhLimitRequest,
    WfhUsageResponse,
)
from teampulse.services import activity as activity_service
from teampulse.services import team as team_service
from teampulse.services import wfh as wfh_service

teams_router = APIRouter(prefix="/teams", tags=["teams"])


@teams_router.post(
    "",
    response_model=TeamResponse,
    status_code=201,
)
async def create_team(
    payload: CreateTeamRequest,
    session: SessionDep,
    auth: AuthDep,
    settings: SettingsDep,
) -> TeamResponse:
    """Create a team; the creator becomes its team admin."""
    return await team_service.create_team(session, auth, payload, settings.default_wfh_limit_per_month)


@teams_router.get(
    "",
    response_model=TeamListResponse,
)
async def list_teams(session: SessionDep, auth: AuthDep) -> TeamListResponse:
    """List the current user's teams."""
    return await team_service.list_my_teams(session, auth)


@teams_router.post(
    "/{team_id}/members",
    response_model=TeamMemberResponse,
    status_code=201,
)
async def add_member(
    team_id: uuid.UUID,
    payload: AddMemberRequest,
    session: SessionDep,
    auth: AuthDep,
) -> TeamMemberResponse:
    """Add a user to the team (team lead, team admin or admin)."""
    return await team_service.add_member(session, auth, team_id, payload)


@teams_router.delete(
    "/{team_id}/members/{member_id}",
    status_code=204,
)
async def remove_member(
    team_id: uuid.UUID,
    member_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> None:
    """Remove a membership (team lead, team admin or admin)."""
    await team_service.remove_member(session, auth, team_id, member_id)


@teams_router.get(
    "/{team_id}/activities",
    response_model=TeamActivityListResponse,
)
async def list_team_activities(
    team_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    date: datetime.date | None = Query(default=None),
    start_date: datetime.date | None = Query(default=None),
    end_date: datetime.date | None = Query(default=None),
    member_id: uuid.UUID | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> TeamActivityListResponse:
    """Paginated activity feed of the team's members."""
    return await activity_service.list_team_activities(
        session, auth, team_id, date, start_date, end_date, member_id, page, limit
    )


@teams_router.get(
    "/{team_id}/wfh-usage",
    response_model=WfhUsageResponse,
)
async def get_wfh_usage(
    team_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    settings: SettingsDep,
) -> WfhUsageResponse:
    """The current user's WFH usage in this team for the current month."""
    return await wfh_service.get_wfh_usage(
        session,
        user_id=auth.user_id,
        team_id=team_id,
        today=now_utc().date(),
        default_limit=settings.default_wfh_limit_per_month,
    )


@teams_router.get(
    "/{team_id}/wfh",
    response_model=TeamWfhConfigResponse,
)
async def get_wfh_config(
    team_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> TeamWfhConfigResponse:
    """Get the team's WFH configuration."""
    return await team_service.get_wfh_config(session, team_id)


@teams_router.put(
    "/{team_id}/wfh",
    response_model=TeamWfhConfigResponse,
)
async def update_wfh_limit(
    team_id: uuid.UUID,
    payload: UpdateWfhLimitRequest,
    session: SessionDep,
    auth: AuthDep,
) -> TeamWfhConfigResponse:
    """Change the team's monthly WFH limit."""
    return await team_service.update_wfh_limit(session, auth, team_id, payload)
