# ruff: noqa: B008
from __future__ import annotations

from typing import Annotated

from fastapi import Cookie, Depends, Header

from teampulse.config import Settings, get_settings
from teampulse.exceptions import AuthorizationError
from teampulse.schemas.auth import AuthContext
from teampulse.security import verify_token
from teampulse.services.credentials import CredentialValidator, get_credential_validator

SettingsDep = Annotated[Settings, Depends(get_settings)]
CredentialValidatorDep = Annotated[CredentialValidator, Depends(get_credential_validator)]

TOKEN_COOKIE = "token"


async def get_auth_context(
    settings: SettingsDep,
    token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> AuthContext:
    """Verify the session token from the cookie, falling back to a Bearer header."""
    if not token and authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer":
            token = credentials.strip()
    return verify_token(settings, token)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_admin(
    auth: AuthDep,
) -> AuthContext:
    """Require admin role for the request."""
    if not auth.is_admin:
        raise AuthorizationError("Admin access required")
    return auth


AdminDep = Annotated[AuthContext, Depends(require_admin)]
