# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from teampulse.api.deps import AdminDep, AuthDep
from teampulse.db import SessionDep
from teampulse.models.enums import RedemptionStatus
from teampulse.schemas.reward import (
    ActivationResponse,
    CreateRedemptionRequest,
    RedemptionListResponse,
    RedemptionResponse,
    UpdateRedemptionRequest,
)
from teampulse.services import redemption as redemption_service

redemptions_router = APIRouter(prefix="/redemptions", tags=["redemptions"])


@redemptions_router.get(
    "",
    response_model=RedemptionListResponse,
)
async def list_redemptions(
    session: SessionDep,
    auth: AuthDep,
    personal: bool = Query(default=False),
    status: RedemptionStatus | None = Query(default=None),
) -> RedemptionListResponse:
    """List redemptions: all for admins, otherwise the caller's own."""
    return await redemption_service.list_redemptions(session, auth, personal, status)


@redemptions_router.post(
    "",
    response_model=RedemptionResponse,
    status_code=201,
)
async def create_redemption(
    payload: CreateRedemptionRequest,
    session: SessionDep,
    auth: AuthDep,
) -> RedemptionResponse:
    """Redeem a reward with points."""
    return await redemption_service.create_redemption(session, auth, payload)


@redemptions_router.put(
    "/{redemption_id}",
    response_model=RedemptionResponse,
)
async def update_redemption(
    redemption_id: uuid.UUID,
    payload: UpdateRedemptionRequest,
    session: SessionDep,
    auth: AdminDep,
) -> RedemptionResponse:
    """Approve, reject or otherwise change a redemption's status (admin only)."""
    return await redemption_service.update_redemption_status(session, auth, redemption_id, payload)


@redemptions_router.delete(
    "/{redemption_id}",
    status_code=204,
)
async def cancel_redemption(
    redemption_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> None:
    """Cancel a pending redemption (owner or admin)."""
    await redemption_service.cancel_redemption(session, auth, redemption_id)


@redemptions_router.post(
    "/{redemption_id}/activate",
    response_model=ActivationResponse,
)
async def activate_redemption(
    redemption_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> ActivationResponse:
    """Activate an approved WFH reward (owner only)."""
    return await redemption_service.activate_redemption(session, auth, redemption_id)
