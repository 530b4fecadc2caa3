"""
Email OTP login flow.

initiate():  validate → lockout / daily cap → license check → issue code →
             count the send → email the code
verify():    validate → load challenge → lockout on exhausted attempts →
             compare → mint session token

Malformed input is rejected before any store or upstream call. Every
failure is raised as a typed AppError; nothing is retried.
"""

from __future__ import annotations

from config import AuthSettings
from errors import (
    AccountLockedError,
    CodeExpiredError,
    IncorrectCodeError,
    SubscriptionRequiredError,
    ValidationError,
)
from infrastructure.license.protocol import LicenseOracle
from schemas.models.session import IssuedToken
from services.login_guard import LoginGuard
from services.otp_service import OtpService
from services.token_service import TokenService
from shared.datetime_utils import format_retry_window
from shared.logging import get_logger, mask_email
from shared.validators import normalize_email, validate_email, validate_otp_code

log = get_logger(__name__)


class AuthService:
    def __init__(
        self,
        guard: LoginGuard,
        license_oracle: LicenseOracle,
        otp: OtpService,
        tokens: TokenService,
        settings: AuthSettings,
    ) -> None:
        self._guard = guard
        self._license = license_oracle
        self._otp = otp
        self._tokens = tokens
        self._settings = settings

    @staticmethod
    def _clean_email(email: str) -> str:
        if not email or not email.strip():
            raise ValidationError("Email required")
        email = normalize_email(email)
        if not validate_email(email):
            raise ValidationError("Invalid email address")
        return email

    async def initiate(self, email: str) -> None:
        email = self._clean_email(email)

        await self._guard.ensure_can_send(email)

        if not await self._license.has_entitlement(email):
            log.info("otp_init_rejected", email=mask_email(email), reason="no_subscription")
            raise SubscriptionRequiredError(
                "No active subscription found for this email."
            )

        challenge = await self._otp.issue(email)
        await self._guard.record_send(email)
        await self._otp.deliver(challenge)

    async def verify(self, email: str, code: str) -> IssuedToken:
        email = self._clean_email(email)
        if not validate_otp_code(code):
            raise ValidationError("Code must be 6 digits")

        challenge = await self._otp.load(email)
        if challenge is None:
            raise CodeExpiredError("Code expired or invalid.")

        # The attempt that trips the limit is rejected without checking the code
        if challenge.attempts >= self._settings.otp_max_attempts:
            await self._guard.lock_out(email)
            window = format_retry_window(self._settings.lockout_seconds)
            raise AccountLockedError(
                f"Too many failed attempts. Account locked for {window}.",
                extra={"retryAfter": window},
            )

        if not self._otp.matches(challenge, code):
            remaining = await self._otp.record_failure(challenge)
            log.info(
                "otp_verify_failed", email=mask_email(email), attempts_remaining=remaining
            )
            raise IncorrectCodeError(remaining)

        await self._otp.consume(email)
        issued = self._tokens.mint(email)
        log.info("session_issued", email=mask_email(email), expires_at=issued.expires_at)
        return issued
