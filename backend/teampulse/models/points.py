# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from teampulse.models.base import TimestampMixin, UUIDBase


class PointTransaction(UUIDBase, TimestampMixin, table=True):
    """Append-only record of points granted to a user by an admin."""

    __tablename__ = "point_transaction"

    user_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    admin_id: uuid.UUID
    points: int
    description: str | None = Field(default=None, max_length=1000)
