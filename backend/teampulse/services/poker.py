"""Planning-poker sessions for teams.

Joining a session registers an empty vote; estimates stay hidden from
responses until the session is revealed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from teampulse.exceptions import NotFoundError, ValidationError
from teampulse.models.enums import PokerStatus, TeamRole
from teampulse.models.poker import PokerSession, PokerVote
from teampulse.models.team import Team, TeamMember
from teampulse.models.user import User
from teampulse.schemas.poker import PokerSessionListResponse, PokerSessionResponse, PokerVoteResponse
from teampulse.services.team import get_team_or_404

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from teampulse.schemas.auth import AuthContext
    from teampulse.schemas.poker import (
        CompletePokerSessionRequest,
        CreatePokerSessionRequest,
        PokerVoteRequest,
    )

logger = logging.getLogger(__name__)


async def _build_session_response(session: AsyncSession, poker: PokerSession) -> PokerSessionResponse:
    result = await session.execute(
        select(PokerVote, User)
        .join(User, col(User.id) == col(PokerVote.user_id))
        .where(col(PokerVote.session_id) == poker.id)
        .order_by(col(PokerVote.created_at))
    )
    revealed = poker.status != PokerStatus.VOTING
    return PokerSessionResponse(
        id=poker.id,
        team_id=poker.team_id,
        story_name=poker.story_name,
        description=poker.description,
        status=poker.status,
        final_points=poker.final_points,
        created_at=poker.created_at,
        votes=[
            PokerVoteResponse(
                user_id=user.id,
                username=user.username,
                points=vote.points if revealed else None,
                has_voted=vote.points is not None,
            )
            for vote, user in result.all()
        ],
    )


async def _get_poker_or_404(session: AsyncSession, session_id: uuid.UUID) -> PokerSession:
    poker = await session.get(PokerSession, session_id)
    if poker is None:
        raise NotFoundError("Poker session")
    return poker


async def _get_vote(session: AsyncSession, session_id: uuid.UUID, user_id: uuid.UUID) -> PokerVote | None:
    result = await session.execute(
        select(PokerVote).where(col(PokerVote.session_id) == session_id, col(PokerVote.user_id) == user_id)
    )
    return result.scalar_one_or_none()


async def _resolve_team(
    session: AsyncSession,
    auth: AuthContext,
    team_id: uuid.UUID | None,
    default_wfh_limit: int,
) -> Team:
    """Pick the given team, else the caller's first team, else a new personal team."""
    if team_id is not None:
        return await get_team_or_404(session, team_id)

    result = await session.execute(
        select(Team)
        .join(TeamMember, col(TeamMember.team_id) == col(Team.id))
        .where(col(TeamMember.user_id) == auth.user_id)
        .order_by(col(TeamMember.created_at))
        .limit(1)
    )
    team = result.scalar_one_or_none()
    if team is not None:
        return team

    owner = auth.external_username or "User"
    team = Team(name=f"{owner}'s Team", description="Default team", wfh_limit_per_month=default_wfh_limit)
    session.add(team)
    await session.flush()
    session.add(TeamMember(user_id=auth.user_id, team_id=team.id, role=TeamRole.MEMBER))
    logger.info("Created default team %s for %s", team.id, auth.user_id)
    return team


async def create_session(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreatePokerSessionRequest,
    default_wfh_limit: int,
) -> PokerSessionResponse:
    """Open a voting round for a story."""
    team = await _resolve_team(session, auth, payload.team_id, default_wfh_limit)
    poker = PokerSession(team_id=team.id, story_name=payload.story_name, description=payload.description)
    session.add(poker)

    await session.commit()
    await session.refresh(poker)
    return await _build_session_response(session, poker)


async def list_sessions(session: AsyncSession, team_id: uuid.UUID | None = None) -> PokerSessionListResponse:
    query = select(PokerSession).order_by(col(PokerSession.created_at).desc())
    if team_id is not None:
        query = query.where(col(PokerSession.team_id) == team_id)
    result = await session.execute(query)
    sessions = list(result.scalars().all())
    return PokerSessionListResponse(
        items=[await _build_session_response(session, p) for p in sessions],
        total=len(sessions),
    )


async def get_session_detail(session: AsyncSession, session_id: uuid.UUID) -> PokerSessionResponse:
    return await _build_session_response(session, await _get_poker_or_404(session, session_id))


async def join_session(session: AsyncSession, auth: AuthContext, session_id: uuid.UUID) -> PokerSessionResponse:
    """Register the caller as a participant. Joining twice is a no-op."""
    poker = await _get_poker_or_404(session, session_id)
    if await _get_vote(session, poker.id, auth.user_id) is None:
        session.add(PokerVote(session_id=poker.id, user_id=auth.user_id))
        await session.commit()
    return await _build_session_response(session, poker)


async def cast_vote(
    session: AsyncSession,
    auth: AuthContext,
    session_id: uuid.UUID,
    payload: PokerVoteRequest,
) -> PokerSessionResponse:
    """Record or replace the caller's estimate."""
    poker = await _get_poker_or_404(session, session_id)
    if poker.status == PokerStatus.COMPLETED:
        raise ValidationError("Poker session is already completed")

    vote = await _get_vote(session, poker.id, auth.user_id)
    if vote is None:
        vote = PokerVote(session_id=poker.id, user_id=auth.user_id)
    vote.points = payload.points
    session.add(vote)

    await session.commit()
    return await _build_session_response(session, poker)


async def reveal_session(session: AsyncSession, auth: AuthContext, session_id: uuid.UUID) -> PokerSessionResponse:
    poker = await _get_poker_or_404(session, session_id)
    if poker.status == PokerStatus.COMPLETED:
        raise ValidationError("Poker session is already completed")

    poker.status = PokerStatus.REVEALED
    session.add(poker)
    await session.commit()
    await session.refresh(poker)
    return await _build_session_response(session, poker)


async def complete_session(
    session: AsyncSession,
    auth: AuthContext,
    session_id: uuid.UUID,
    payload: CompletePokerSessionRequest,
) -> PokerSessionResponse:
    """Close the session with the agreed estimate."""
    poker = await _get_poker_or_404(session, session_id)
    poker.status = PokerStatus.COMPLETED
    poker.final_points = payload.final_points
    session.add(poker)
    await session.commit()
    await session.refresh(poker)
    logger.info("Poker session %s completed with %s points", poker.id, poker.final_points)
    return await _build_session_response(session, poker)
