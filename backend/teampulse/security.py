from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import jwt

from teampulse.exceptions import AuthenticationError
from teampulse.schemas.auth import AuthContext

if TYPE_CHECKING:
    from teampulse.config import Settings
    from teampulse.models.enums import AuthType
    from teampulse.models.user import User

logger = logging.getLogger(__name__)


def issue_token(
    settings: Settings,
    user: User,
    auth_type: AuthType,
    external_username: str | None = None,
) -> str:
    """Sign a session token for ``user`` valid for ``settings.token_ttl_days``."""
    issued_at = datetime.now(UTC)
    claims = {
        "user_id": str(user.id),
        "role": user.role,
        "auth_type": auth_type.value,
        "external_username": external_username,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.token_ttl_days),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(settings: Settings, token: str | None) -> AuthContext:
    """Decode a session token.

    Missing, malformed, expired and tampered tokens all surface as the same
    ``AuthenticationError`` so callers cannot tell the cases apart.
    """
    if not token:
        raise AuthenticationError
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat"]},
        )
        return AuthContext(
            user_id=uuid.UUID(claims["user_id"]),
            role=claims["role"],
            auth_type=claims["auth_type"],
            external_username=claims.get("external_username"),
        )
    except (jwt.PyJWTError, KeyError, ValueError) as exc:
        logger.debug("Rejected session token: %s", exc)
        raise AuthenticationError from None
