"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

JWT_SECRET is required before the app can mint or verify session tokens;
create_app() refuses to start without it.
"""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Sole persistence layer: OTP challenges, counters, lockouts, user documents
    redis_uri: str


class JWTSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    jwt_secret: str = ""
    session_ttl_seconds: int = 604800  # 7 days
    cookie_name: str = "__Secure-SessionToken"
    cookie_secure: bool = True


class AuthSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    otp_ttl_seconds: int = 300
    otp_max_attempts: int = 3
    otp_daily_send_limit: int = 5
    lockout_seconds: int = 86400
    send_counter_ttl_seconds: int = 86400


class LicenseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    whop_api_key: str = ""
    whop_company_id: str = ""
    # Empty means any membership with an accepted status grants access
    whop_product_id: str = ""
    whop_api_base: str = "https://api.whop.com/v1"
    whop_timeout_seconds: float = 5.0


class EmailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"
    resend_from: str = "Security <auth@example.com>"
    email_product_name: str = "Studio"
    email_timeout_seconds: float = 5.0


class AssetSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    asset_root: str = "assets"
    asset_route: str = "/v2/core.js"
    asset_primary_key: str = "v2/core.js"
    asset_fallback_key: str = "core.js"


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    # "console" or "json"; unset means json in production, console elsewhere
    log_format: Optional[str] = None


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1
    sentry_profile_sample_rate: float = 0.05


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Core
    env: str = "development"
    app_name: str = "license-gate"

    # CORS: reflect any caller origin, credentials allowed
    cors_origin_regex: str = ".*"

    # Request body size limit for stored user documents (bytes); 1 MB default
    max_content_length: int = 1_048_576

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    redis: Optional[RedisSettings] = None
    jwt: Optional[JWTSettings] = None
    auth: Optional[AuthSettings] = None
    license: Optional[LicenseSettings] = None
    email: Optional[EmailSettings] = None
    assets: Optional[AssetSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.redis is None:
            self.redis = RedisSettings()
        if self.jwt is None:
            self.jwt = JWTSettings()
        if self.auth is None:
            self.auth = AuthSettings()
        if self.license is None:
            self.license = LicenseSettings()
        if self.email is None:
            self.email = EmailSettings()
        if self.assets is None:
            self.assets = AssetSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        if self.logging.log_format is None:
            self.logging.log_format = "json" if self.is_production else "console"

        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
