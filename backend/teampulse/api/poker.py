# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from teampulse.api.deps import AuthDep, SettingsDep
from teampulse.db import SessionDep
from teampulse.schemas.poker import (
    CompletePokerSessionRequest,
    CreatePokerSessionRequest,
    PokerSessionListResponse,
    PokerSessionResponse,
    PokerVoteRequest,
)
from teampulse.services import poker as poker_service

poker_router = APIRouter(prefix="/poker/sessions", tags=["poker"])


@poker_router.get(
    "",
    response_model=PokerSessionListResponse,
)
async def list_sessions(
    session: SessionDep,
    auth: AuthDep,
    team_id: uuid.UUID | None = Query(default=None),
) -> PokerSessionListResponse:
    """List poker sessions, optionally for one team."""
    return await poker_service.list_sessions(session, team_id)


@poker_router.post(
    "",
    response_model=PokerSessionResponse,
    status_code=201,
)
async def create_session(
    payload: CreatePokerSessionRequest,
    session: SessionDep,
    auth: AuthDep,
    settings: SettingsDep,
) -> PokerSessionResponse:
    """Open a poker session for a story."""
    return await poker_service.create_session(session, auth, payload, settings.default_wfh_limit_per_month)


@poker_router.get(
    "/{session_id}",
    response_model=PokerSessionResponse,
)
async def get_session(
    session_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> PokerSessionResponse:
    """Get a poker session with its participants."""
    return await poker_service.get_session_detail(session, session_id)


@poker_router.post(
    "/{session_id}/join",
    response_model=PokerSessionResponse,
)
async def join_session(
    session_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> PokerSessionResponse:
    """Join a poker session."""
    return await poker_service.join_session(session, auth, session_id)


@poker_router.post(
    "/{session_id}/vote",
    response_model=PokerSessionResponse,
)
async def vote(
    session_id: uuid.UUID,
    payload: PokerVoteRequest,
    session: SessionDep,
    auth: AuthDep,
) -> PokerSessionResponse:
    """Cast or change an estimate."""
    return await poker_service.cast_vote(session, auth, session_id, payload)


@poker_router.post(
    "/{session_id}/reveal",
    response_model=PokerSessionResponse,
)
async def reveal(
    session_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> PokerSessionResponse:
    """Reveal all estimates."""
    return await poker_service.reveal_session(session, auth, session_id)


@poker_router.post(
    "/{session_id}/complete",
    response_model=PokerSessionResponse,
)
async def complete(
    session_id: uuid.UUID,
    payload: CompletePokerSessionRequest,
    session: SessionDep,
    auth: AuthDep,
) -> PokerSessionResponse:
    """Close the session with the agreed estimate."""
    return await poker_service.complete_session(session, auth, session_id, payload)
