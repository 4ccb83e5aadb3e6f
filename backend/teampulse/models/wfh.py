# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from teampulse.models.base import TimestampMixin, UUIDBase


class WFHRecord(UUIDBase, TimestampMixin, table=True):
    """One remote-work day counted against a user's monthly team allowance."""

    __tablename__ = "wfh_record"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "team_id", "date", name="uq_wfh_record_user_team_date"),
        sa.Index("ix_wfh_record_user_team_month", "user_id", "team_id", "year", "month"),
    )

    user_id: uuid.UUID = Field(index=True)
    team_id: uuid.UUID = Field(index=True)
    date: datetime.date
    month: int
    year: int


class UserWFHQuota(UUIDBase, TimestampMixin, table=True):
    """Bonus WFH days granted to a user for one month by activated rewards."""

    __tablename__ = "user_wfh_quota"
    __table_args__ = (sa.UniqueConstraint("user_id", "month", "year", name="uq_user_wfh_quota_month"),)

    user_id: uuid.UUID = Field(index=True)
    month: int
    year: int
    total_quota: int = Field(default=0, sa_column_kwargs={"server_default": sa.text("0")})
