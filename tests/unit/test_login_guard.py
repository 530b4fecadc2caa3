"""Unit tests for daily send limits and lockouts."""

import pytest

from errors import AccountLockedError, DailyLimitError
from infrastructure.kv.keys import block_key, otp_key, sends_key
from services.login_guard import LoginGuard
from tests.conftest import START_TIME

EMAIL = "a@example.com"
TODAY = "2025-03-14"


@pytest.fixture
def guard(kv_store, auth_settings, clock) -> LoginGuard:
    return LoginGuard(kv_store, auth_settings, clock=clock)


class TestEnsureCanSend:
    async def test_fresh_identity_is_allowed(self, guard):
        await guard.ensure_can_send(EMAIL)

    async def test_active_lockout_blocks(self, guard, kv_store):
        until_ms = int((START_TIME + 3600) * 1000)
        await kv_store.put(block_key(EMAIL), str(until_ms))
        with pytest.raises(AccountLockedError) as exc_info:
            await guard.ensure_can_send(EMAIL)
        assert exc_info.value.extra == {"retryAfter": "1h"}

    async def test_elapsed_lockout_marker_is_ignored(self, guard, kv_store):
        await kv_store.put(block_key(EMAIL), str(int((START_TIME - 1) * 1000)))
        await guard.ensure_can_send(EMAIL)

    async def test_lockout_checked_before_daily_cap(self, guard, kv_store):
        await kv_store.put(block_key(EMAIL), str(int((START_TIME + 60) * 1000)))
        await kv_store.put(sends_key(EMAIL, TODAY), "5")
        with pytest.raises(AccountLockedError):
            await guard.ensure_can_send(EMAIL)

    async def test_daily_cap_blocks(self, guard, kv_store):
        await kv_store.put(sends_key(EMAIL, TODAY), "5")
        with pytest.raises(DailyLimitError):
            await guard.ensure_can_send(EMAIL)

    async def test_below_cap_is_allowed(self, guard, kv_store):
        await kv_store.put(sends_key(EMAIL, TODAY), "4")
        await guard.ensure_can_send(EMAIL)

    async def test_counter_is_per_utc_day(self, guard, kv_store, clock):
        await kv_store.put(sends_key(EMAIL, TODAY), "5")
        clock.advance(12 * 3600)  # 2025-03-15T00:00:00Z
        await guard.ensure_can_send(EMAIL)

    async def test_counter_is_per_email(self, guard, kv_store):
        await kv_store.put(sends_key(EMAIL, TODAY), "5")
        await guard.ensure_can_send("b@example.com")


class TestRecordSend:
    async def test_increments_with_day_ttl(self, guard, kv_store):
        assert await guard.record_send(EMAIL) == 1
        assert await guard.record_send(EMAIL) == 2
        assert await kv_store.get(sends_key(EMAIL, TODAY)) == "2"
        assert kv_store.ttls[sends_key(EMAIL, TODAY)] == 86400


class TestLockOut:
    async def test_sets_marker_and_kills_challenge(self, guard, kv_store):
        await kv_store.put_json(otp_key(EMAIL), {"email": EMAIL, "code": "1", "attempts": 3})
        await guard.lock_out(EMAIL)

        assert await kv_store.get(otp_key(EMAIL)) is None
        assert await kv_store.get(block_key(EMAIL)) == str(int((START_TIME + 86400) * 1000))
        assert kv_store.ttls[block_key(EMAIL)] == 86400
        assert await guard.locked_until_ms(EMAIL) == int((START_TIME + 86400) * 1000)

    async def test_lockout_expires_after_a_day(self, guard, clock):
        await guard.lock_out(EMAIL)
        clock.advance(86400)
        assert await guard.locked_until_ms(EMAIL) is None
        await guard.ensure_can_send(EMAIL)
