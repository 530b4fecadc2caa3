"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. The global exception handler
converts AppError subclasses to consistent JSON responses of the shape
``{"message": ..., "code": ..., **extra}``.

Non-AppError exceptions are logged and returned as 500s (with Sentry
reporting in production).
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.logging import get_logger

log = get_logger(__name__)


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra or {}

    def to_dict(self) -> dict:
        payload: dict = {"message": self.message, "code": self.error_code}
        payload.update(self.extra)
        return payload


# ── 4xx: caller problems ─────────────────────────────────────────────────────


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class IncorrectCodeError(AppError):
    status_code = 400
    error_code = "incorrect_code"

    def __init__(self, attempts_remaining: int) -> None:
        super().__init__(
            "Incorrect code", extra={"attemptsRemaining": attempts_remaining}
        )
        self.attempts_remaining = attempts_remaining


class AuthenticationError(AppError):
    status_code = 401
    error_code = "unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    error_code = "forbidden"


class SubscriptionRequiredError(ForbiddenError):
    error_code = "NO_SUBSCRIPTION"


class CodeExpiredError(ForbiddenError):
    error_code = "code_expired"


class NotFoundError(AppError):
    status_code = 404
    error_code = "not_found"


class PayloadTooLargeError(AppError):
    status_code = 413
    error_code = "payload_too_large"


class RateLimitError(AppError):
    status_code = 429
    error_code = "rate_limit_exceeded"


class AccountLockedError(RateLimitError):
    error_code = "account_locked"


class DailyLimitError(RateLimitError):
    error_code = "daily_limit_reached"


# ── 5xx: system problems ─────────────────────────────────────────────────────


class EmailDeliveryError(AppError):
    status_code = 500
    error_code = "email_delivery_failed"


class StorageError(AppError):
    status_code = 500
    error_code = "storage_error"


class LicenseProviderError(AppError):
    status_code = 502
    error_code = "provider_error"


class StoreUnavailableError(AppError):
    status_code = 503
    error_code = "store_unavailable"


def internal_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"message": "Server Error", "code": "internal_error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=ValidationError("Invalid request body").to_dict(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        log.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return internal_error_response()
