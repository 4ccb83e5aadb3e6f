from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ExternalIdentity(BaseModel):
    """Identity confirmed by the external issue tracker."""

    username: str
    email: str | None = None


@runtime_checkable
class CredentialValidator(Protocol):
    """Interface for checking a username/password pair."""

    async def validate(self, username: str, password: str) -> ExternalIdentity | None:
        """Return the confirmed identity, or None when the credentials are rejected."""
        ...


class RedmineCredentialValidator:
    """Checks credentials against a Redmine ``/users/current.json`` endpoint.

    The password is first tried as an API key; on 401 it is retried as a
    basic-auth password.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 8.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/users/current.json"
        self._timeout = timeout
        self._transport = transport

    async def validate(self, username: str, password: str) -> ExternalIdentity | None:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.get(self._url, headers={"X-Redmine-API-Key": password})
                if response.status_code == httpx.codes.UNAUTHORIZED:
                    response = await client.get(self._url, auth=(username, password))
            except httpx.HTTPError:
                logger.exception("Credential check against %s failed", self._url)
                return None

        if response.status_code != httpx.codes.OK:
            logger.info("Credential check rejected for %s (status %d)", username, response.status_code)
            return None

        try:
            body = response.json()
        except ValueError:
            logger.warning("Credential check for %s returned a non-JSON body", username)
            return None

        user = body.get("user") if isinstance(body, dict) else None
        if not isinstance(user, dict):
            logger.warning("Credential check for %s returned no user object", username)
            return None
        return ExternalIdentity(username=user.get("login") or username, email=user.get("mail"))


class InMemoryCredentialValidator:
    """In-memory stub implementation for development and tests."""

    def __init__(self) -> None:
        self._accounts: dict[str, tuple[str, str | None]] = {}

    def seed(self, username: str, password: str, email: str | None = None) -> None:
        """Seed an account for testing."""
        self._accounts[username] = (password, email)

    async def validate(self, username: str, password: str) -> ExternalIdentity | None:
        account = self._accounts.get(username)
        if account is None or account[0] != password:
            return None
        return ExternalIdentity(username=username, email=account[1])


_credential_validator: CredentialValidator | None = None


def get_credential_validator() -> CredentialValidator:
    """FastAPI dependency for the credential validator."""
    global _credential_validator
    if _credential_validator is None:
        from teampulse.config import get_settings

        settings = get_settings()
        if settings.use_redmine_auth:
            _credential_validator = RedmineCredentialValidator(settings.redmine_url, settings.redmine_timeout_seconds)
        else:
            _credential_validator = InMemoryCredentialValidator()
    return _credential_validator


def set_credential_validator(validator: CredentialValidator | None) -> None:
    """Override the validator (for testing or production wiring)."""
    global _credential_validator
    _credential_validator = validator
