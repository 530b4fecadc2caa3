"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import AppSettings
from errors import register_error_handlers
from infrastructure.blob.local import LocalBlobStore
from infrastructure.blob.protocol import BlobStore
from infrastructure.email.protocol import EmailProvider
from infrastructure.email.resend import ResendProvider
from infrastructure.http_client import HttpClient
from infrastructure.kv.protocol import KeyValueStore
from infrastructure.kv.redis_client import create_redis_client
from infrastructure.kv.store import RedisKeyValueStore
from infrastructure.license.protocol import LicenseOracle
from infrastructure.license.whop import WhopLicenseOracle
from routes.asset_routes import create_asset_router
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from routes.storage_routes import router as storage_router
from services.asset_service import ProtectedAssetService
from services.auth_service import AuthService
from services.document_service import UserDocumentService
from services.login_guard import LoginGuard
from services.otp_service import OtpService
from services.token_service import TokenService
from shared.datetime_utils import Clock, system_clock
from shared.log_context import setup_logging_middleware
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    if not settings.jwt.jwt_secret:
        raise RuntimeError("JWT_SECRET must be set")

    setup_logging(settings.logging.log_level, settings.logging.log_format)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            environment=settings.env,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        redis_client = await create_redis_client(settings.redis.redis_uri)
        license_http = HttpClient("whop", timeout=settings.license.whop_timeout_seconds)
        email_http = HttpClient("resend", timeout=settings.email.email_timeout_seconds)

        wire_services(
            app,
            settings,
            kv_store=RedisKeyValueStore(redis_client),
            license_oracle=WhopLicenseOracle(settings.license, license_http),
            email_provider=ResendProvider(
                settings.email,
                email_http,
                otp_ttl_seconds=settings.auth.otp_ttl_seconds,
            ),
            blob_store=LocalBlobStore(settings.assets.asset_root),
        )
        log.info("gateway_started", env=settings.env)

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await license_http.aclose()
        await email_http.aclose()
        await redis_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )
    install_routes(app, settings)
    return app


def install_routes(app: FastAPI, settings: AppSettings) -> None:
    """Attach middleware, error handlers and routers to *app*."""
    setup_logging_middleware(app)
    # Added last so it wraps the logging middleware and its 500 responses.
    # Reflects the caller's Origin (a literal "*" is not allowed with credentials)
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(storage_router)
    app.include_router(create_asset_router(settings.assets.asset_route))


def wire_services(
    app: FastAPI,
    settings: AppSettings,
    *,
    kv_store: KeyValueStore,
    license_oracle: LicenseOracle,
    email_provider: EmailProvider,
    blob_store: BlobStore,
    clock: Clock = system_clock,
) -> None:
    """Build the service graph over the given backends and store it on app.state."""
    token_service = TokenService(
        settings.jwt.jwt_secret,
        ttl_seconds=settings.jwt.session_ttl_seconds,
        clock=clock,
    )
    auth_service = AuthService(
        LoginGuard(kv_store, settings.auth, clock=clock),
        license_oracle,
        OtpService(kv_store, email_provider, settings.auth),
        token_service,
        settings.auth,
    )

    app.state.settings = settings
    app.state.kv_store = kv_store
    app.state.token_service = token_service
    app.state.auth_service = auth_service
    app.state.asset_service = ProtectedAssetService(
        blob_store,
        settings.assets.asset_primary_key,
        settings.assets.asset_fallback_key,
    )
    app.state.document_service = UserDocumentService(kv_store)
