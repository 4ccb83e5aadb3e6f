"""Integration tests for teams, memberships and team WFH settings."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from teampulse.models import TeamRole, UserRole

if TYPE_CHECKING:
    from conftest import TeamFactory, UserFactory
    from httpx import AsyncClient

BASE_URL = "/teams"


# ---------------------------------------------------------------------------
# Teams and members
# ---------------------------------------------------------------------------


async def test_create_team_makes_creator_team_admin(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, headers = await make_user()
    resp = await async_client.post(BASE_URL, json={"name": "Platform"}, headers=headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["wfh_limit_per_month"] == 3
    assert data["role"] == "team_admin"

    resp = await async_client.get(BASE_URL, headers=headers)
    assert [t["name"] for t in resp.json()["items"]] == ["Platform"]


async def test_create_team_limit_bounds(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, headers = await make_user()
    resp = await async_client.post(BASE_URL, json={"name": "X", "wfh_limit_per_month": 32}, headers=headers)
    assert resp.status_code == 400
    resp = await async_client.post(BASE_URL, json={"name": "X", "wfh_limit_per_month": 0}, headers=headers)
    assert resp.status_code == 201


async def test_add_and_remove_member(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, owner_headers = await make_user()
    newcomer, newcomer_headers = await make_user()
    team = (await async_client.post(BASE_URL, json={"name": "Platform"}, headers=owner_headers)).json()

    resp = await async_client.post(
        f"{BASE_URL}/{team['id']}/members", json={"user_id": str(newcomer.id)}, headers=owner_headers
    )
    assert resp.status_code == 201
    member = resp.json()
    assert member["role"] == "member"

    resp = await async_client.post(
        f"{BASE_URL}/{team['id']}/members", json={"user_id": str(newcomer.id)}, headers=owner_headers
    )
    assert resp.status_code == 409

    resp = await async_client.get(BASE_URL, headers=newcomer_headers)
    assert resp.json()["total"] == 1

    resp = await async_client.delete(f"{BASE_URL}/{team['id']}/members/{member['id']}", headers=owner_headers)
    assert resp.status_code == 204
    resp = await async_client.get(BASE_URL, headers=newcomer_headers)
    assert resp.json()["total"] == 0


async def test_plain_member_cannot_add_members(
    async_client: AsyncClient,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    member, headers = await make_user()
    other, _ = await make_user()
    team = await make_team(members=[(member, TeamRole.MEMBER, False)])

    resp = await async_client.post(
        f"{BASE_URL}/{team.id}/members", json={"user_id": str(other.id)}, headers=headers
    )
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# WFH settings and usage
# ---------------------------------------------------------------------------


async def test_wfh_config_roundtrip(
    async_client: AsyncClient,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    _, headers = await make_user()
    team = await make_team(wfh_limit_per_month=3)

    resp = await async_client.put(f"{BASE_URL}/{team.id}/wfh", json={"wfh_limit_per_month": 5}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["wfh_limit_per_month"] == 5

    resp = await async_client.get(f"{BASE_URL}/{team.id}/wfh", headers=headers)
    assert resp.json() == {"team_id": str(team.id), "name": team.name, "wfh_limit_per_month": 5}


async def test_wfh_limit_validation(
    async_client: AsyncClient,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    _, headers = await make_user()
    team = await make_team()
    for value in (-1, 32):
        resp = await async_client.put(
            f"{BASE_URL}/{team.id}/wfh", json={"wfh_limit_per_month": value}, headers=headers
        )
        assert resp.status_code == 400


async def test_wfh_config_unknown_team(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, headers = await make_user()
    resp = await async_client.get(f"{BASE_URL}/{uuid.uuid4()}/wfh", headers=headers)
    assert resp.status_code == 404


async def test_wfh_usage_counts_current_month(
    async_client: AsyncClient,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    user, headers = await make_user()
    team = await make_team(wfh_limit_per_month=2, members=[(user, TeamRole.MEMBER, False)])

    usage = (await async_client.get(f"{BASE_URL}/{team.id}/wfh-usage", headers=headers)).json()
    assert (usage["used"], usage["limit"], usage["remaining"]) == (0, 2, 2)

    today = f"{usage['year']:04d}-{usage['month']:02d}-01"
    await async_client.post(
        "/activities",
        json={
            "date": today,
            "subject": "Remote day",
            "description": "Worked from home",
            "status": "Done",
            "is_wfh": True,
            "team_id": str(team.id),
        },
        headers=headers,
    )

    usage = (await async_client.get(f"{BASE_URL}/{team.id}/wfh-usage", headers=headers)).json()
    assert (usage["used"], usage["remaining"], usage["bonus_quota"]) == (1, 1, 0)


# ---------------------------------------------------------------------------
# Team activity feed
# ---------------------------------------------------------------------------


async def test_team_activity_feed_for_leads(
    async_client: AsyncClient,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    lead, lead_headers = await make_user()
    member, member_headers = await make_user()
    admin, admin_headers = await make_user(role=UserRole.ADMIN)
    team = await make_team(
        members=[
            (lead, TeamRole.MEMBER, True),
            (member, TeamRole.MEMBER, False),
            (admin, TeamRole.MEMBER, False),
        ]
    )
    for headers, day in ((member_headers, "2025-03-03"), (member_headers, "2025-03-04"), (admin_headers, "2025-03-04")):
        await async_client.post(
            "/activities",
            json={"date": day, "subject": "Work", "description": "Did things", "status": "Done"},
            headers=headers,
        )

    resp = await async_client.get(f"{BASE_URL}/{team.id}/activities", params={"limit": 1}, headers=lead_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert len(data["items"]) == 1
    assert data["items"][0]["date"] == "2025-03-04"
    assert {m["username"] for m in data["members"]} == {lead.username, member.username}

    resp = await async_client.get(
        f"{BASE_URL}/{team.id}/activities", params={"date": "2025-03-03"}, headers=admin_headers
    )
    assert resp.json()["total"] == 1

    resp = await async_client.get(f"{BASE_URL}/{team.id}/activities", headers=member_headers)
    assert resp.status_code == 403
