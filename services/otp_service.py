"""
One-time passcode issuing, delivery and checking.

A challenge is ``{email, code, attempts}`` under ``otp:{email}`` with a short
TTL; issuing overwrites any previous challenge, which invalidates the old
code. The TTL is refreshed whenever the challenge is rewritten.
"""

from __future__ import annotations

import secrets
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from config import AuthSettings
from errors import EmailDeliveryError
from infrastructure.email.protocol import EmailProvider
from infrastructure.kv.keys import otp_key
from infrastructure.kv.protocol import KeyValueStore
from schemas.models.otp import OtpChallenge
from shared.generators import generate_otp_code
from shared.logging import get_logger, mask_email

log = get_logger(__name__)


class OtpService:
    def __init__(
        self,
        store: KeyValueStore,
        email_provider: EmailProvider,
        settings: AuthSettings,
    ) -> None:
        self._store = store
        self._email = email_provider
        self._settings = settings

    async def issue(self, email: str) -> OtpChallenge:
        challenge = OtpChallenge(email=email, code=generate_otp_code(), attempts=0)
        await self._save(challenge)
        log.info("otp_issued", email=mask_email(email))
        return challenge

    async def deliver(self, challenge: OtpChallenge) -> None:
        # The stored challenge stays valid even when delivery fails
        if not await self._email.send_otp_email(challenge.email, challenge.code):
            raise EmailDeliveryError("Failed to send email.")

    async def load(self, email: str) -> Optional[OtpChallenge]:
        raw = await self._store.get_json(otp_key(email))
        if raw is None:
            return None
        try:
            return OtpChallenge.model_validate(raw)
        except PydanticValidationError:
            log.warning("otp_challenge_unreadable", email=mask_email(email))
            return None

    @staticmethod
    def matches(challenge: OtpChallenge, code: str) -> bool:
        return secrets.compare_digest(challenge.code.encode(), code.encode())

    async def record_failure(self, challenge: OtpChallenge) -> int:
        """Count a failed attempt and return how many attempts remain."""
        challenge.attempts += 1
        await self._save(challenge)
        return max(0, self._settings.otp_max_attempts - challenge.attempts)

    async def consume(self, email: str) -> None:
        await self._store.delete(otp_key(email))

    async def _save(self, challenge: OtpChallenge) -> None:
        await self._store.put_json(
            otp_key(challenge.email),
            challenge.model_dump(),
            ttl_seconds=self._settings.otp_ttl_seconds,
        )
