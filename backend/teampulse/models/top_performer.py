# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from teampulse.models.base import TimestampMixin, UUIDBase


class TopPerformer(UUIDBase, TimestampMixin, table=True):
    """Admin-picked leaderboard slot for a calendar month."""

    __tablename__ = "top_performer"
    __table_args__ = (sa.UniqueConstraint("month", "year", "rank", name="uq_top_performer_rank"),)

    user_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    team_id: uuid.UUID
    rank: int
    month: int
    year: int
