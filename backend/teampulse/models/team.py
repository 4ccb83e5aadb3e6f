# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from teampulse.models.base import TimestampMixin, UUIDBase
from teampulse.models.enums import TeamRole


class Team(UUIDBase, TimestampMixin, table=True):
    """A team with its monthly WFH allowance."""

    __tablename__ = "team"

    name: str = Field(max_length=100)
    description: str | None = None
    wfh_limit_per_month: int = Field(default=3, sa_column_kwargs={"server_default": sa.text("3")})


class TeamMember(UUIDBase, TimestampMixin, table=True):
    """Membership of a user in a team."""

    __tablename__ = "team_member"
    __table_args__ = (sa.UniqueConstraint("user_id", "team_id", name="uq_team_member_user_team"),)

    user_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    team_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("team.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    role: str = Field(default=TeamRole.MEMBER, max_length=50, sa_column_kwargs={"server_default": "member"})
    is_lead: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
