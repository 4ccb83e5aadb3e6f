import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class FieldError(BaseModel):
    """A single field-level validation failure."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    error_code: str
    status_code: int
    details: list[FieldError] | None = None


class AppError(Exception):
    """Base application exception."""

    error_code = "APP_ERROR"

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    def extra(self) -> dict[str, Any]:
        """Additional machine-readable fields merged into the error body."""
        return {}


class ValidationError(AppError):
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[FieldError] | None = None) -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)
        self.details = details


class NotFoundError(AppError):
    error_code = "NOT_FOUND"

    def __init__(self, resource: str) -> None:
        super().__init__(f"{resource} not found", status_code=status.HTTP_404_NOT_FOUND)


class AuthenticationError(AppError):
    error_code = "AUTHENTICATION_ERROR"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED)


class AuthorizationError(AppError):
    error_code = "AUTHORIZATION_ERROR"

    def __init__(self, message: str = "You do not have permission to access this resource") -> None:
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class ConflictError(AppError):
    error_code = "CONFLICT"

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class WfhLimitExceeded(AppError):
    """Raised when flagging another day as WFH would pass the team's monthly cap."""

    error_code = "WFH_LIMIT_EXCEEDED"

    def __init__(self, used: int, limit: int) -> None:
        super().__init__(
            f"WFH limit exceeded. You have used {used}/{limit} WFH days this month.",
            status_code=status.HTTP_403_FORBIDDEN,
        )
        self.used = used
        self.limit = limit

    def extra(self) -> dict[str, Any]:
        return {"wfh_used": self.used, "wfh_limit": self.limit}


def _error_body(
    message: str,
    error_code: str,
    status_code: int,
    details: list[FieldError] | None = None,
) -> dict[str, Any]:
    return ErrorResponse(
        error=message,
        error_code=error_code,
        status_code=status_code,
        details=details,
    ).model_dump(exclude_none=True)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    content = _error_body(exc.message, exc.error_code, exc.status_code, getattr(exc, "details", None))
    content.update(exc.extra())
    return JSONResponse(status_code=exc.status_code, content=content)


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        FieldError(
            field=".".join(str(part) for part in err["loc"] if part != "body"),
            message=err["msg"],
        )
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Validation failed", "VALIDATION_ERROR", status.HTTP_400_BAD_REQUEST, details),
    )


async def _integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=_error_body(
            "A record with this value already exists",
            "UNIQUE_CONSTRAINT_ERROR",
            status.HTTP_409_CONFLICT,
        ),
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error", "INTERNAL_ERROR", status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_exception_handler)
