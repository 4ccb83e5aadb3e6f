"""Integration tests for the activity API and its WFH bookkeeping."""

from __future__ import annotations

import datetime
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from teampulse.models import Activity, TeamRole, UserRole, WFHRecord

if TYPE_CHECKING:
    from conftest import TeamFactory, UserFactory
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

BASE_URL = "/activities"


def _activity_payload(day: str = "2025-03-03", **overrides: object) -> dict:
    payload: dict = {
        "date": day,
        "time": "09:30",
        "subject": "Sprint work",
        "description": "Implemented the login page",
        "status": "InProgress",
    }
    payload.update(overrides)
    return payload


async def _wfh_count(db_session: AsyncSession, user_id: uuid.UUID, team_id: uuid.UUID) -> int:
    result = await db_session.execute(
        select(func.count())
        .select_from(WFHRecord)
        .where(col(WFHRecord.user_id) == user_id, col(WFHRecord.team_id) == team_id)
    )
    return result.scalar_one()


async def _wfh_dates(db_session: AsyncSession, user_id: uuid.UUID) -> list[tuple[datetime.date, uuid.UUID]]:
    result = await db_session.execute(
        select(WFHRecord.date, WFHRecord.team_id)
        .where(col(WFHRecord.user_id) == user_id)
        .order_by(col(WFHRecord.date))
    )
    return [(row.date, row.team_id) for row in result.all()]


# ---------------------------------------------------------------------------
# Create / read
# ---------------------------------------------------------------------------


async def test_create_activity(async_client: AsyncClient, make_user: UserFactory) -> None:
    user, headers = await make_user()
    resp = await async_client.post(BASE_URL, json=_activity_payload(), headers=headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["user_id"] == str(user.id)
    assert data["date"] == "2025-03-03"
    assert data["status"] == "InProgress"
    assert data["is_wfh"] is False


async def test_create_activity_requires_auth(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_activity_payload())
    assert resp.status_code == 401
    assert resp.json()["error"] == "Authentication required"


async def test_list_and_get_activities(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, headers = await make_user()
    first = await async_client.post(BASE_URL, json=_activity_payload("2025-03-03"), headers=headers)
    await async_client.post(BASE_URL, json=_activity_payload("2025-03-05"), headers=headers)

    resp = await async_client.get(BASE_URL, headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert data["items"][0]["date"] == "2025-03-05"

    resp = await async_client.get(BASE_URL, params={"start_date": "2025-03-04"}, headers=headers)
    assert resp.json()["total"] == 1

    resp = await async_client.get(f"{BASE_URL}/{first.json()['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["date"] == "2025-03-03"


async def test_get_activity_not_found(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, headers = await make_user()
    resp = await async_client.get(f"{BASE_URL}/{uuid.uuid4()}", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "NOT_FOUND"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


async def test_create_activity_rejects_bad_fields(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, headers = await make_user()
    payload = _activity_payload(time="25:00", subject="   ", description="", status="Finished")
    resp = await async_client.post(BASE_URL, json=payload, headers=headers)
    assert resp.status_code == 400
    data = resp.json()
    assert data["error_code"] == "VALIDATION_ERROR"
    fields = {d["field"] for d in data["details"]}
    assert {"time", "subject", "description", "status"} <= fields


async def test_create_activity_subject_too_long(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, headers = await make_user()
    resp = await async_client.post(BASE_URL, json=_activity_payload(subject="x" * 256), headers=headers)
    assert resp.status_code == 400


async def test_create_wfh_activity_requires_team(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, headers = await make_user()
    resp = await async_client.post(BASE_URL, json=_activity_payload(is_wfh=True), headers=headers)
    assert resp.status_code == 400
    assert resp.json()["details"] == [{"field": "team_id", "message": "team_id is required when is_wfh is true"}]


# ---------------------------------------------------------------------------
# WFH limit
# ---------------------------------------------------------------------------


async def test_wfh_limit_blocks_fourth_day(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    user, headers = await make_user()
    team = await make_team(wfh_limit_per_month=3, members=[(user, TeamRole.MEMBER, False)])

    for day in ("2025-03-03", "2025-03-04", "2025-03-05"):
        resp = await async_client.post(
            BASE_URL, json=_activity_payload(day, is_wfh=True, team_id=str(team.id)), headers=headers
        )
        assert resp.status_code == 201

    resp = await async_client.post(
        BASE_URL, json=_activity_payload("2025-03-06", is_wfh=True, team_id=str(team.id)), headers=headers
    )
    assert resp.status_code == 403
    data = resp.json()
    assert data["error_code"] == "WFH_LIMIT_EXCEEDED"
    assert data["wfh_used"] == 3
    assert data["wfh_limit"] == 3

    assert await _wfh_count(db_session, user.id, team.id) == 3
    result = await db_session.execute(select(func.count()).select_from(Activity))
    assert result.scalar_one() == 3


async def test_wfh_limit_is_per_month(
    async_client: AsyncClient,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    user, headers = await make_user()
    team = await make_team(wfh_limit_per_month=1, members=[(user, TeamRole.MEMBER, False)])

    resp = await async_client.post(
        BASE_URL, json=_activity_payload("2025-03-31", is_wfh=True, team_id=str(team.id)), headers=headers
    )
    assert resp.status_code == 201
    resp = await async_client.post(
        BASE_URL, json=_activity_payload("2025-04-01", is_wfh=True, team_id=str(team.id)), headers=headers
    )
    assert resp.status_code == 201


async def test_second_wfh_activity_same_day_does_not_count_twice(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    user, headers = await make_user()
    team = await make_team(wfh_limit_per_month=1, members=[(user, TeamRole.MEMBER, False)])

    for _ in range(2):
        resp = await async_client.post(
            BASE_URL, json=_activity_payload("2025-03-03", is_wfh=True, team_id=str(team.id)), headers=headers
        )
        assert resp.status_code == 201

    assert await _wfh_count(db_session, user.id, team.id) == 1


async def test_unknown_team_uses_default_limit(
    async_client: AsyncClient,
    make_user: UserFactory,
) -> None:
    _, headers = await make_user()
    team_id = str(uuid.uuid4())
    for day in ("2025-03-03", "2025-03-04", "2025-03-05"):
        resp = await async_client.post(
            BASE_URL, json=_activity_payload(day, is_wfh=True, team_id=team_id), headers=headers
        )
        assert resp.status_code == 201

    resp = await async_client.post(
        BASE_URL, json=_activity_payload("2025-03-06", is_wfh=True, team_id=team_id), headers=headers
    )
    assert resp.status_code == 403
    assert resp.json()["wfh_limit"] == 3


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


async def test_toggle_wfh_keeps_single_record(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    user, headers = await make_user()
    team = await make_team(members=[(user, TeamRole.MEMBER, False)])

    created = await async_client.post(
        BASE_URL, json=_activity_payload(is_wfh=True, team_id=str(team.id)), headers=headers
    )
    activity_id = created.json()["id"]
    assert await _wfh_count(db_session, user.id, team.id) == 1

    resp = await async_client.put(f"{BASE_URL}/{activity_id}", json={"is_wfh": False}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["is_wfh"] is False
    assert await _wfh_count(db_session, user.id, team.id) == 0

    resp = await async_client.put(f"{BASE_URL}/{activity_id}", json={"is_wfh": True}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["is_wfh"] is True
    assert await _wfh_count(db_session, user.id, team.id) == 1


async def test_update_turning_wfh_on_checks_limit(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    user, headers = await make_user()
    team = await make_team(wfh_limit_per_month=1, members=[(user, TeamRole.MEMBER, False)])

    await async_client.post(
        BASE_URL, json=_activity_payload("2025-03-03", is_wfh=True, team_id=str(team.id)), headers=headers
    )
    office = await async_client.post(
        BASE_URL, json=_activity_payload("2025-03-04", team_id=str(team.id)), headers=headers
    )

    resp = await async_client.put(f"{BASE_URL}/{office.json()['id']}", json={"is_wfh": True}, headers=headers)
    assert resp.status_code == 403
    assert resp.json()["wfh_used"] == 1

    activity = await db_session.get(Activity, uuid.UUID(office.json()["id"]))
    assert activity is not None
    assert activity.is_wfh is False


async def test_update_turning_wfh_on_without_team(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, headers = await make_user()
    created = await async_client.post(BASE_URL, json=_activity_payload(), headers=headers)

    resp = await async_client.put(f"{BASE_URL}/{created.json()['id']}", json={"is_wfh": True}, headers=headers)
    assert resp.status_code == 400


async def test_moving_and_unflagging_releases_original_day(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    user, headers = await make_user()
    team = await make_team(members=[(user, TeamRole.MEMBER, False)])
    created = await async_client.post(
        BASE_URL, json=_activity_payload("2025-03-03", is_wfh=True, team_id=str(team.id)), headers=headers
    )

    resp = await async_client.put(
        f"{BASE_URL}/{created.json()['id']}", json={"date": "2025-03-04", "is_wfh": False}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["date"] == "2025-03-04"
    assert await _wfh_dates(db_session, user.id) == []


async def test_moving_wfh_activity_moves_its_record(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    user, headers = await make_user()
    team = await make_team(members=[(user, TeamRole.MEMBER, False)])
    other = await make_team(name="Other", members=[(user, TeamRole.MEMBER, False)])
    created = await async_client.post(
        BASE_URL, json=_activity_payload("2025-03-03", is_wfh=True, team_id=str(team.id)), headers=headers
    )
    url = f"{BASE_URL}/{created.json()['id']}"

    resp = await async_client.put(url, json={"date": "2025-03-10"}, headers=headers)
    assert resp.status_code == 200
    assert await _wfh_dates(db_session, user.id) == [(datetime.date(2025, 3, 10), team.id)]

    resp = await async_client.put(url, json={"team_id": str(other.id)}, headers=headers)
    assert resp.status_code == 200
    assert await _wfh_dates(db_session, user.id) == [(datetime.date(2025, 3, 10), other.id)]

    resp = await async_client.put(url, json={"is_wfh": False}, headers=headers)
    assert resp.status_code == 200
    assert await _wfh_dates(db_session, user.id) == []


async def test_moving_wfh_activity_into_full_month_is_rejected(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    user, headers = await make_user()
    team = await make_team(wfh_limit_per_month=1, members=[(user, TeamRole.MEMBER, False)])
    user_id, team_id = user.id, team.id
    await async_client.post(
        BASE_URL, json=_activity_payload("2025-04-01", is_wfh=True, team_id=str(team.id)), headers=headers
    )
    created = await async_client.post(
        BASE_URL, json=_activity_payload("2025-03-03", is_wfh=True, team_id=str(team.id)), headers=headers
    )

    resp = await async_client.put(f"{BASE_URL}/{created.json()['id']}", json={"date": "2025-04-02"}, headers=headers)
    assert resp.status_code == 403
    assert await _wfh_dates(db_session, user_id) == [
        (datetime.date(2025, 3, 3), team_id),
        (datetime.date(2025, 4, 1), team_id),
    ]


async def test_clearing_team_of_wfh_activity_is_rejected(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    user, headers = await make_user()
    team = await make_team(members=[(user, TeamRole.MEMBER, False)])
    created = await async_client.post(
        BASE_URL, json=_activity_payload(is_wfh=True, team_id=str(team.id)), headers=headers
    )

    resp = await async_client.put(f"{BASE_URL}/{created.json()['id']}", json={"team_id": None}, headers=headers)
    assert resp.status_code == 400
    assert await _wfh_count(db_session, user.id, team.id) == 1


async def test_update_other_users_activity_forbidden(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, owner_headers = await make_user()
    _, other_headers = await make_user()
    created = await async_client.post(BASE_URL, json=_activity_payload(), headers=owner_headers)

    resp = await async_client.put(
        f"{BASE_URL}/{created.json()['id']}", json={"subject": "Hijacked"}, headers=other_headers
    )
    assert resp.status_code == 403


async def test_admin_update_books_wfh_for_owner(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    owner, owner_headers = await make_user()
    _, admin_headers = await make_user(role=UserRole.ADMIN)
    team = await make_team(members=[(owner, TeamRole.MEMBER, False)])
    created = await async_client.post(
        BASE_URL, json=_activity_payload(team_id=str(team.id)), headers=owner_headers
    )

    resp = await async_client.put(
        f"{BASE_URL}/{created.json()['id']}", json={"is_wfh": True, "status": "Done"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "Done"
    assert await _wfh_count(db_session, owner.id, team.id) == 1


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


async def test_delete_activity_keeps_wfh_record(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user: UserFactory,
    make_team: TeamFactory,
) -> None:
    user, headers = await make_user()
    team = await make_team(members=[(user, TeamRole.MEMBER, False)])
    created = await async_client.post(
        BASE_URL, json=_activity_payload(is_wfh=True, team_id=str(team.id)), headers=headers
    )

    resp = await async_client.delete(f"{BASE_URL}/{created.json()['id']}", headers=headers)
    assert resp.status_code == 204

    resp = await async_client.get(f"{BASE_URL}/{created.json()['id']}", headers=headers)
    assert resp.status_code == 404
    # Known gap: the WFH day stays booked after its activity is gone.
    assert await _wfh_count(db_session, user.id, team.id) == 1


async def test_delete_other_users_activity_forbidden(async_client: AsyncClient, make_user: UserFactory) -> None:
    _, owner_headers = await make_user()
    _, other_headers = await make_user()
    created = await async_client.post(BASE_URL, json=_activity_payload(), headers=owner_headers)

    resp = await async_client.delete(f"{BASE_URL}/{created.json()['id']}", headers=other_headers)
    assert resp.status_code == 403
