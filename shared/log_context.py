"""
Request logging middleware for FastAPI.

Provides:
- Request ID generation for correlation (also returned as X-Request-ID)
- Request context bound into structlog contextvars for every log line
- request_completed logging with timing, level chosen by status code
- Unhandled exceptions answered with the standard 500 body inside the
  middleware stack, so the response still carries CORS headers
"""

from __future__ import annotations

import time

import sentry_sdk
import structlog
from fastapi import FastAPI, Request

from errors import internal_error_response
from shared.generators import generate_request_id
from shared.logging import get_logger, hash_ip

log = get_logger("gateway.request")

_IP_HEADERS = ("CF-Connecting-IP", "X-Forwarded-For", "X-Real-IP")


def get_client_ip(request: Request) -> str:
    """Resolve the caller IP, preferring proxy headers over the socket peer."""
    for header in _IP_HEADERS:
        value = request.headers.get(header)
        if value:
            first = value.split(",")[0].strip()
            if first:
                return first
    return request.client.host if request.client else ""


def setup_logging_middleware(app: FastAPI) -> None:
    """Register the request logging middleware on *app*."""

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        started = time.perf_counter()
        request_id = generate_request_id()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            ip_hash=hash_ip(get_client_ip(request)),
        )

        try:
            response = await call_next(request)
        except Exception as e:
            # Answer here so the 500 still passes back through CORS
            sentry_sdk.capture_exception(e)
            log.error(
                "unhandled_exception",
                error=str(e),
                error_type=type(e).__name__,
            )
            response = internal_error_response()

        duration_ms = int((time.perf_counter() - started) * 1000)
        if response.status_code >= 500:
            log_fn = log.error
        elif response.status_code >= 400:
            log_fn = log.warning
        else:
            log_fn = log.info
        log_fn(
            "request_completed",
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        response.headers["X-Request-ID"] = request_id
        return response
