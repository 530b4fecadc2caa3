"""
Send-rate limiting and lockout for OTP logins.

Per email, two records live in the key-value store:
- ``sends:{email}:{UTC date}`` counts codes sent today (24 h TTL, so the
  counter resets with the date in its key);
- ``block:{email}`` holds the epoch-ms instant until which logins are blocked.

The daily-cap check and the increment are separate round trips, so two
concurrent initiations for the same email can both pass the check. These
limits deter abuse; they are not safety invariants.
"""

from __future__ import annotations

from typing import Optional

from config import AuthSettings
from errors import AccountLockedError, DailyLimitError
from infrastructure.kv.keys import block_key, otp_key, sends_key
from infrastructure.kv.protocol import KeyValueStore
from shared.datetime_utils import Clock, format_retry_window, system_clock, utc_day
from shared.logging import get_logger, mask_email

log = get_logger(__name__)


class LoginGuard:
    def __init__(
        self,
        store: KeyValueStore,
        settings: AuthSettings,
        clock: Clock = system_clock,
    ) -> None:
        self._store = store
        self._settings = settings
        self._clock = clock

    async def locked_until_ms(self, email: str) -> Optional[int]:
        """Return the lockout expiry (epoch ms) if *email* is locked right now."""
        raw = await self._store.get(block_key(email))
        if raw is None:
            return None
        try:
            until_ms = int(raw)
        except ValueError:
            return None
        if self._clock() * 1000 < until_ms:
            return until_ms
        return None

    async def sends_today(self, email: str) -> int:
        raw = await self._store.get(sends_key(email, utc_day(self._clock())))
        return int(raw) if raw else 0

    async def ensure_can_send(self, email: str) -> None:
        """Raise if *email* is locked out or has used today's send allowance."""
        until_ms = await self.locked_until_ms(email)
        if until_ms is not None:
            remaining = until_ms / 1000 - self._clock()
            log.warning("otp_send_blocked", email=mask_email(email), reason="locked")
            raise AccountLockedError(
                "Account locked due to failed attempts.",
                extra={"retryAfter": format_retry_window(remaining)},
            )

        if await self.sends_today(email) >= self._settings.otp_daily_send_limit:
            log.warning(
                "otp_send_blocked", email=mask_email(email), reason="daily_limit"
            )
            raise DailyLimitError("Daily login limit reached. Try tomorrow.")

    async def record_send(self, email: str) -> int:
        return await self._store.incr(
            sends_key(email, utc_day(self._clock())),
            ttl_seconds=self._settings.send_counter_ttl_seconds,
        )

    async def lock_out(self, email: str) -> None:
        """Block logins for the lockout period and kill the live challenge."""
        lockout = self._settings.lockout_seconds
        until_ms = int((self._clock() + lockout) * 1000)
        await self._store.put(block_key(email), str(until_ms), ttl_seconds=lockout)
        await self._store.delete(otp_key(email))
        log.warning("account_locked", email=mask_email(email), lockout_seconds=lockout)
