from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from teampulse.config import get_settings
from teampulse.db import get_session
from teampulse.main import app
from teampulse.models import SQLModel, Team, TeamMember, User
from teampulse.models.enums import AuthType, TeamRole, UserRole
from teampulse.security import issue_token
from teampulse.services.credentials import InMemoryCredentialValidator, set_credential_validator

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

    UserFactory = Callable[..., Awaitable[tuple[User, dict[str, str]]]]
    TeamFactory = Callable[..., Awaitable[Team]]

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")

TEST_PASSWORD = "s3cret"


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create a fresh database per test.

    Defaults to an in-memory SQLite database shared over a single connection.
    """
    kwargs: dict[str, Any] = {}
    if TEST_DATABASE_URL.startswith("sqlite"):
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    _engine = create_async_engine(TEST_DATABASE_URL, **kwargs)
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def credential_validator() -> Iterator[InMemoryCredentialValidator]:
    """Replace the external credential check with a seeded in-memory stub."""
    validator = InMemoryCredentialValidator()
    validator.seed("alice", TEST_PASSWORD, email="alice@example.com")
    set_credential_validator(validator)
    yield validator
    set_credential_validator(None)


def auth_headers(user: User) -> dict[str, str]:
    token = issue_token(get_settings(), user, AuthType.LOCAL, external_username=user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db_session: AsyncSession) -> UserFactory:
    """Factory that inserts a user and returns it with Bearer auth headers."""
    counter = 0

    async def _make(
        username: str | None = None,
        role: UserRole = UserRole.MEMBER,
        points: int = 0,
    ) -> tuple[User, dict[str, str]]:
        nonlocal counter
        counter += 1
        user = User(username=username or f"user{counter}", email=None, role=role, points=points)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user, auth_headers(user)

    return _make


@pytest.fixture
def make_team(db_session: AsyncSession) -> TeamFactory:
    """Factory that inserts a team and optionally its members."""

    async def _make(
        name: str = "Core",
        wfh_limit_per_month: int = 3,
        members: list[tuple[User, TeamRole, bool]] | None = None,
    ) -> Team:
        team = Team(name=name, wfh_limit_per_month=wfh_limit_per_month)
        db_session.add(team)
        await db_session.flush()
        for user, role, is_lead in members or []:
            db_session.add(TeamMember(user_id=user.id, team_id=team.id, role=role, is_lead=is_lead))
        await db_session.commit()
        await db_session.refresh(team)
        return team

    return _make
