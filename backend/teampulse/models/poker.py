# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from teampulse.models.base import TimestampMixin, UUIDBase
from teampulse.models.enums import PokerStatus


class PokerSession(UUIDBase, TimestampMixin, table=True):
    """A planning-poker round for one story."""

    __tablename__ = "poker_session"

    team_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("team.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    story_name: str = Field(max_length=255)
    description: str = ""
    status: str = Field(default=PokerStatus.VOTING, max_length=50, sa_column_kwargs={"server_default": "voting"})
    final_points: int | None = None


class PokerVote(UUIDBase, TimestampMixin, table=True):
    """One participant's estimate in a poker session."""

    __tablename__ = "poker_vote"
    __table_args__ = (sa.UniqueConstraint("session_id", "user_id", name="uq_poker_vote_session_user"),)

    session_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid, sa.ForeignKey("poker_session.id", ondelete="CASCADE"), nullable=False, index=True
        ),
    )
    user_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False),
    )
    points: int | None = None
