# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import datetime
import uuid

from fastapi import APIRouter, Query

from teampulse.api.deps import AuthDep, SettingsDep
from teampulse.db import SessionDep
from teampulse.schemas.activity import (
    ActivityListResponse,
    ActivityResponse,
    CreateActivityRequest,
    UpdateActivityRequest,
)
from teampulse.services import activity as activity_service

activities_router = APIRouter(prefix="/activities", tags=["activities"])


@activities_router.post(
    "",
    response_model=ActivityResponse,
    status_code=201,
)
async def create_activity(
    payload: CreateActivityRequest,
    session: SessionDep,
    auth: AuthDep,
    settings: SettingsDep,
) -> ActivityResponse:
    """Log an activity for the current user."""
    return await activity_service.create_activity(session, auth, payload, settings.default_wfh_limit_per_month)


@activities_router.get(
    "",
    response_model=ActivityListResponse,
)
async def list_activities(
    session: SessionDep,
    auth: AuthDep,
    user_id: uuid.UUID | None = Query(default=None),
    start_date: datetime.date | None = Query(default=None),
    end_date: datetime.date | None = Query(default=None),
) -> ActivityListResponse:
    """List activities, by default the current user's."""
    return await activity_service.list_activities(session, auth, user_id, start_date, end_date)


@activities_router.get(
    "/{activity_id}",
    response_model=ActivityResponse,
)
async def get_activity(
    activity_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> ActivityResponse:
    """Get a single activity."""
    return await activity_service.get_activity(session, auth, activity_id)


@activities_router.put(
    "/{activity_id}",
    response_model=ActivityResponse,
)
async def update_activity(
    activity_id: uuid.UUID,
    payload: UpdateActivityRequest,
    session: SessionDep,
    auth: AuthDep,
    settings: SettingsDep,
) -> ActivityResponse:
    """Update an activity (owner or admin)."""
    return await activity_service.update_activity(
        session, auth, activity_id, payload, settings.default_wfh_limit_per_month
    )


@activities_router.delete(
    "/{activity_id}",
    status_code=204,
)
async def delete_activity(
    activity_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> None:
    """Delete an activity (owner or admin)."""
    await activity_service.delete_activity(session, auth, activity_id)
