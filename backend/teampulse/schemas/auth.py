# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class AuthContext(BaseModel):
    """Identity carried by a verified session token."""

    user_id: uuid.UUID
    role: str = "member"
    auth_type: str = "local"
    external_username: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class LoginRequest(BaseModel):
    """Request body for logging in."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    """Public view of a user."""

    id: uuid.UUID
    username: str
    email: str | None
    role: str
    points: int
    created_at: datetime


class LoginResponse(BaseModel):
    """Response for a successful login."""

    token: str
    user: UserResponse
