"""Integration tests for admin points grants and the transaction journal."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from teampulse.exceptions import NotFoundError
from teampulse.models import AuditLog, UserRole
from teampulse.services.user import lock_user

if TYPE_CHECKING:
    from conftest import UserFactory
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession


def _points_url(user_id: uuid.UUID) -> str:
    return f"/users/{user_id}/points"


async def test_grant_points(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
) -> None:
    user, headers = await make_user(points=10)
    admin, admin_headers = await make_user(role=UserRole.ADMIN)

    resp = await async_client.post(
        _points_url(user.id), json={"points": 25, "description": "Great demo"}, headers=admin_headers
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["balance"]["points"] == 35
    assert data["transaction"]["admin_id"] == str(admin.id)
    assert data["transaction"]["description"] == "Great demo"

    resp = await async_client.get(_points_url(user.id), headers=headers)
    assert resp.json() == {"user_id": str(user.id), "username": user.username, "points": 35}

    entries = (await db_session.execute(select(AuditLog))).scalars().all()
    assert [(e.entity_type, e.action) for e in entries] == [("POINTS", "GRANT")]


async def test_grant_points_range(async_client: AsyncClient, make_user: UserFactory) -> None:
    user, _ = await make_user()
    _, admin_headers = await make_user(role=UserRole.ADMIN)

    for points in (0, -5, 1001):
        resp = await async_client.post(_points_url(user.id), json={"points": points}, headers=admin_headers)
        assert resp.status_code == 400

    resp = await async_client.post(_points_url(user.id), json={"points": 1000}, headers=admin_headers)
    assert resp.status_code == 200


async def test_grant_points_admin_only(async_client: AsyncClient, make_user: UserFactory) -> None:
    user, headers = await make_user()
    resp = await async_client.post(_points_url(user.id), json={"points": 5}, headers=headers)
    assert resp.status_code == 403


async def test_grant_points_unknown_user(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, admin_headers = await make_user(role=UserRole.ADMIN)
    resp = await async_client.post(_points_url(uuid.uuid4()), json={"points": 5}, headers=admin_headers)
    assert resp.status_code == 404


async def test_transactions_newest_first(async_client: AsyncClient, make_user: UserFactory) -> None:
    user, headers = await make_user()
    _, admin_headers = await make_user(role=UserRole.ADMIN)
    for points in (5, 10, 15):
        await async_client.post(_points_url(user.id), json={"points": points}, headers=admin_headers)

    resp = await async_client.get(f"{_points_url(user.id)}/transactions", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 3
    assert sum(t["points"] for t in data["items"]) == 30
    created = [t["created_at"] for t in data["items"]]
    assert created == sorted(created, reverse=True)


async def test_lock_user(db_session: AsyncSession, make_user: UserFactory) -> None:
    user, _ = await make_user(points=7)
    locked = await lock_user(db_session, user.id)
    assert locked.points == 7

    with pytest.raises(NotFoundError):
        await lock_user(db_session, uuid.uuid4())
