# ruff: noqa: B008, TC001
from __future__ import annotations

from fastapi import APIRouter, Query

from teampulse.api.deps import AdminDep, AuthDep
from teampulse.db import SessionDep
from teampulse.models.base import now_utc
from teampulse.schemas.top_performer import SetTopPerformerRequest, TopPerformerListResponse
from teampulse.services import top_performer as top_performer_service

top_performers_router = APIRouter(prefix="/top-performers", tags=["top-performers"])


@top_performers_router.get(
    "",
    response_model=TopPerformerListResponse,
)
async def list_top_performers(
    session: SessionDep,
    auth: AuthDep,
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=2000, le=9999),
) -> TopPerformerListResponse:
    """Leaderboard for a month, the current one by default."""
    today = now_utc()
    return await top_performer_service.list_top_performers(session, month or today.month, year or today.year)


@top_performers_router.post(
    "",
    response_model=TopPerformerListResponse,
)
async def set_top_performer(
    payload: SetTopPerformerRequest,
    session: SessionDep,
    auth: AdminDep,
) -> TopPerformerListResponse:
    """Set the user at a leaderboard rank (admin only)."""
    return await top_performer_service.set_top_performer(session, auth, payload)
