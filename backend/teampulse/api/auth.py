from __future__ import annotations

from fastapi import APIRouter, Response

from teampulse.api.deps import TOKEN_COOKIE, AuthDep, CredentialValidatorDep, SettingsDep
from teampulse.db import SessionDep
from teampulse.schemas.auth import LoginRequest, LoginResponse, UserResponse
from teampulse.services import auth as auth_service

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post(
    "/login",
    response_model=LoginResponse,
)
async def login(
    payload: LoginRequest,
    response: Response,
    session: SessionDep,
    settings: SettingsDep,
    validator: CredentialValidatorDep,
) -> LoginResponse:
    """Log in with tracker credentials and receive a session cookie."""
    result = await auth_service.login(session, settings, validator, payload)
    production = settings.environment == "production"
    response.set_cookie(
        TOKEN_COOKIE,
        result.token,
        max_age=settings.token_ttl_seconds,
        httponly=True,
        secure=production,
        samesite="none" if production else "lax",
        path="/",
    )
    return result


@auth_router.post(
    "/logout",
    status_code=204,
)
async def logout(response: Response) -> None:
    """Clear the session cookie."""
    response.delete_cookie(TOKEN_COOKIE, path="/")


@auth_router.get(
    "/me",
    response_model=UserResponse,
)
async def me(session: SessionDep, auth: AuthDep) -> UserResponse:
    """Return the logged-in user."""
    return await auth_service.get_current_user(session, auth)
