"""Integration tests for login, logout and session token handling."""

from __future__ import annotations

from typing import TYPE_CHECKING

from conftest import TEST_PASSWORD
from sqlalchemy import select
from sqlmodel import col

from teampulse.models import User

if TYPE_CHECKING:
    from conftest import UserFactory
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession


async def test_login_creates_member_and_sets_cookie(async_client: AsyncClient, db_session: AsyncSession) -> None:
    resp = await async_client.post("/auth/login", json={"username": "alice", "password": TEST_PASSWORD})
    assert resp.status_code == 200
    data = resp.json()
    assert data["user"]["username"] == "alice"
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["role"] == "member"
    assert data["user"]["points"] == 0
    assert resp.cookies.get("token") == data["token"]
    assert "httponly" in resp.headers["set-cookie"].lower()

    result = await db_session.execute(select(User).where(col(User.username) == "alice"))
    assert result.scalar_one().role == "member"


async def test_login_reuses_existing_user(async_client: AsyncClient, db_session: AsyncSession) -> None:
    for _ in range(2):
        resp = await async_client.post("/auth/login", json={"username": "alice", "password": TEST_PASSWORD})
        assert resp.status_code == 200

    result = await db_session.execute(select(User).where(col(User.username) == "alice"))
    assert len(result.scalars().all()) == 1


async def test_login_bad_credentials(async_client: AsyncClient) -> None:
    resp = await async_client.post("/auth/login", json={"username": "alice", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.json()["error_code"] == "AUTHENTICATION_ERROR"


async def test_login_missing_fields(async_client: AsyncClient) -> None:
    resp = await async_client.post("/auth/login", json={"username": "alice"})
    assert resp.status_code == 400
    assert resp.json()["details"][0]["field"] == "password"


async def test_cookie_authenticates_requests(async_client: AsyncClient) -> None:
    await async_client.post("/auth/login", json={"username": "alice", "password": TEST_PASSWORD})

    # The client keeps the cookie from the login response.
    resp = await async_client.get("/auth/me")
    assert resp.status_code == 200
    assert resp.json()["username"] == "alice"

    resp = await async_client.post("/auth/logout")
    assert resp.status_code == 204
    resp = await async_client.get("/auth/me")
    assert resp.status_code == 401


async def test_bearer_header_authenticates(async_client: AsyncClient, make_user: UserFactory) -> None:
    user, headers = await make_user()
    resp = await async_client.get("/auth/me", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["id"] == str(user.id)


async def test_invalid_tokens_rejected(async_client: AsyncClient) -> None:
    for headers in ({}, {"Authorization": "Bearer not-a-jwt"}, {"Authorization": "Basic abc"}):
        resp = await async_client.get("/auth/me", headers=headers)
        assert resp.status_code == 401
        assert resp.json()["error"] == "Authentication required"
