# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from teampulse.api.deps import AdminDep, AuthDep
from teampulse.db import SessionDep
from teampulse.schemas.points import (
    GrantPointsRequest,
    GrantPointsResponse,
    PointsBalanceResponse,
    PointTransactionListResponse,
)
from teampulse.services import points as points_service

users_router = APIRouter(prefix="/users/{user_id}/points", tags=["points"])


@users_router.get(
    "",
    response_model=PointsBalanceResponse,
)
async def get_points(
    user_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> PointsBalanceResponse:
    """Get a user's points balance."""
    return await points_service.get_balance(session, user_id)


@users_router.post(
    "",
    response_model=GrantPointsResponse,
)
async def grant_points(
    user_id: uuid.UUID,
    payload: GrantPointsRequest,
    session: SessionDep,
    auth: AdminDep,
) -> GrantPointsResponse:
    """Award points to a user (admin only)."""
    return await points_service.grant_points(session, auth, user_id, payload)


@users_router.get(
    "/transactions",
    response_model=PointTransactionListResponse,
)
async def list_transactions(
    user_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> PointTransactionListResponse:
    """List a user's points grants, newest first."""
    return await points_service.list_transactions(session, user_id, offset, limit)
