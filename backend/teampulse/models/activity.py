# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from teampulse.models.base import TimestampMixin, UUIDBase, now_utc


class Activity(UUIDBase, TimestampMixin, table=True):
    """A single daily work-log entry."""

    __tablename__ = "activity"
    __table_args__ = (sa.Index("ix_activity_user_date", "user_id", "date"),)

    user_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    date: datetime.date = Field(index=True)
    time: str | None = Field(default=None, max_length=5)
    subject: str = Field(max_length=255)
    description: str
    status: str = Field(max_length=50)
    blocked_reason: str | None = None
    is_wfh: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
    team_id: uuid.UUID | None = Field(default=None, index=True)
    project: str | None = Field(default=None, max_length=255)
    updated_at: datetime.datetime = Field(  # type: ignore[call-overload]
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now(), "onupdate": sa.func.now()},
    )
