# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from teampulse.models.base import TimestampMixin, UUIDBase
from teampulse.models.enums import RedemptionStatus

UNLIMITED_QUANTITY = -1


class Reward(UUIDBase, TimestampMixin, table=True):
    """A catalog item that can be bought with points."""

    __tablename__ = "reward"

    name: str = Field(max_length=255, index=True)
    description: str | None = None
    points_cost: int
    quantity: int = Field(default=UNLIMITED_QUANTITY, sa_column_kwargs={"server_default": sa.text("-1")})
    is_active: bool = Field(default=True, sa_column_kwargs={"server_default": sa.true()})
    expires_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]

    @property
    def is_unlimited(self) -> bool:
        return self.quantity == UNLIMITED_QUANTITY


class Redemption(UUIDBase, TimestampMixin, table=True):
    """A user's purchase of a reward, moving through the approval workflow."""

    __tablename__ = "redemption"
    __table_args__ = (sa.Index("ix_redemption_user_status", "user_id", "status"),)

    user_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    reward_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("reward.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    status: str = Field(
        default=RedemptionStatus.PENDING, max_length=50, index=True, sa_column_kwargs={"server_default": "pending"}
    )
    is_activated: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
    activated_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    expires_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
