"""Integration tests for the monthly top-performer leaderboard."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, select

from teampulse.models import TeamRole, TopPerformer, UserRole

if TYPE_CHECKING:
    from conftest import TeamFactory, UserFactory
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

BASE_URL = "/top-performers"


async def test_set_rank_replaces_previous_holder(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    first, _ = await make_user()
    second, _ = await make_user()
    _, admin_headers = await make_user(role=UserRole.ADMIN)
    team = await make_team(members=[(first, TeamRole.MEMBER, False), (second, TeamRole.MEMBER, False)])

    for user in (first, second):
        resp = await async_client.post(
            BASE_URL,
            json={"user_id": str(user.id), "rank": 1, "month": 3, "year": 2025},
            headers=admin_headers,
        )
        assert resp.status_code == 200

    data = resp.json()
    assert [(p["rank"], p["username"], p["team_name"]) for p in data["items"]] == [(1, second.username, team.name)]

    result = await db_session.execute(select(func.count()).select_from(TopPerformer))
    assert result.scalar_one() == 1


async def test_list_orders_by_rank(
    async_client: AsyncClient,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    users = [(await make_user())[0] for _ in range(3)]
    _, admin_headers = await make_user(role=UserRole.ADMIN)
    await make_team(members=[(u, TeamRole.MEMBER, False) for u in users])

    for rank, user in zip((3, 1, 2), users, strict=True):
        await async_client.post(
            BASE_URL,
            json={"user_id": str(user.id), "rank": rank, "month": 6, "year": 2025},
            headers=admin_headers,
        )

    resp = await async_client.get(BASE_URL, params={"month": 6, "year": 2025}, headers=admin_headers)
    assert [p["rank"] for p in resp.json()["items"]] == [1, 2, 3]

    resp = await async_client.get(BASE_URL, params={"month": 7, "year": 2025}, headers=admin_headers)
    assert resp.json()["items"] == []


async def test_user_without_team_rejected(async_client: AsyncClient, make_user: UserFactory) -> None:
    loner, _ = await make_user()
    _, admin_headers = await make_user(role=UserRole.ADMIN)

    resp = await async_client.post(
        BASE_URL,
        json={"user_id": str(loner.id), "rank": 2, "month": 3, "year": 2025},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "User must be a member of at least one team"


async def test_invalid_rank_and_unknown_user(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, admin_headers = await make_user(role=UserRole.ADMIN)

    resp = await async_client.post(
        BASE_URL,
        json={"user_id": str(uuid.uuid4()), "rank": 4, "month": 3, "year": 2025},
        headers=admin_headers,
    )
    assert resp.status_code == 400

    resp = await async_client.post(
        BASE_URL,
        json={"user_id": str(uuid.uuid4()), "rank": 1, "month": 3, "year": 2025},
        headers=admin_headers,
    )
    assert resp.status_code == 404


async def test_member_cannot_set_top_performer(async_client: AsyncClient, make_user: UserFactory) -> None:
    user, headers = await make_user()
    resp = await async_client.post(
        BASE_URL,
        json={"user_id": str(user.id), "rank": 1, "month": 3, "year": 2025},
        headers=headers,
    )
    assert resp.status_code == 403
