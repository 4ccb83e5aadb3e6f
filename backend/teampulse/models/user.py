from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from teampulse.models.base import TimestampMixin, UUIDBase
from teampulse.models.enums import UserRole


class User(UUIDBase, TimestampMixin, table=True):
    """A dashboard user; the points balance lives on this row."""

    __tablename__ = "app_user"

    username: str = Field(max_length=255, sa_column_kwargs={"unique": True}, index=True)
    email: str | None = Field(default=None, max_length=255)
    role: str = Field(default=UserRole.MEMBER, max_length=50, sa_column_kwargs={"server_default": "member"})
    points: int = Field(default=0, sa_column_kwargs={"server_default": sa.text("0")})
