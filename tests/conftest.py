"""
Shared test fixtures.

Patches dotenv so pydantic-settings never reads the project's real .env file
during tests; config is controlled through monkeypatch.setenv() or explicit
settings objects.

Provides in-memory stand-ins for the gateway's backends:
  • FakeClock           - controllable epoch-seconds clock
  • InMemoryKeyValueStore - KeyValueStore with TTLs driven by FakeClock
  • FakeLicenseOracle   - entitlement by email set, optional provider failure
  • FakeEmailProvider   - records sent codes, optional delivery failure
  • FakeBlobStore       - dict-backed BlobStore
"""

from __future__ import annotations

import json
from typing import Any, Optional

import pytest

from config import AppSettings, AuthSettings, JWTSettings, RedisSettings
from errors import LicenseProviderError, StoreUnavailableError
from infrastructure.blob.protocol import BlobObject

JWT_SECRET = "test-secret-that-is-long-enough-for-hs256!"

# 2025-03-14T12:00:00Z
START_TIME = 1741953600.0


# ── Helpers ────────────────────────────────────────────────────────────────


class FakeClock:
    def __init__(self, now: float = START_TIME) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryKeyValueStore:
    """KeyValueStore double. ``ttls`` records the TTL of the last write per key."""

    def __init__(self, clock: FakeClock) -> None:
        self._clock = clock
        self._data: dict[str, tuple[str, Optional[float]]] = {}
        self.ttls: dict[str, Optional[int]] = {}
        self.unavailable = False

    def _check(self) -> None:
        if self.unavailable:
            raise StoreUnavailableError("Storage temporarily unavailable")

    def seed(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Synchronous write for test setup; non-strings are stored as JSON."""
        raw = value if isinstance(value, str) else json.dumps(value)
        expires_at = self._clock() + ttl_seconds if ttl_seconds else None
        self._data[key] = (raw, expires_at)
        self.ttls[key] = ttl_seconds

    def peek(self, key: str) -> Optional[str]:
        return self._live(key)

    def peek_json(self, key: str) -> Optional[Any]:
        raw = self._live(key)
        return None if raw is None else json.loads(raw)

    def keys(self) -> list[str]:
        return [k for k in list(self._data) if self._live(k) is not None]

    def _live(self, key: str) -> Optional[str]:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return value

    async def get(self, key: str) -> Optional[str]:
        self._check()
        return self._live(key)

    async def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        self._check()
        expires_at = self._clock() + ttl_seconds if ttl_seconds else None
        self._data[key] = (value, expires_at)
        self.ttls[key] = ttl_seconds

    async def get_json(self, key: str) -> Optional[Any]:
        raw = await self.get(key)
        return None if raw is None else json.loads(raw)

    async def put_json(
        self, key: str, value: Any, ttl_seconds: Optional[int] = None
    ) -> None:
        await self.put(key, json.dumps(value), ttl_seconds)

    async def incr(self, key: str, ttl_seconds: Optional[int] = None) -> int:
        self._check()
        current = self._live(key)
        if current is None:
            await self.put(key, "1", ttl_seconds)
            return 1
        value = int(current) + 1
        self._data[key] = (str(value), self._data[key][1])
        return value

    async def delete(self, key: str) -> None:
        self._check()
        self._data.pop(key, None)


class FakeLicenseOracle:
    def __init__(self, entitled: Optional[set[str]] = None) -> None:
        self.entitled = entitled if entitled is not None else set()
        self.fail = False
        self.calls: list[str] = []

    async def has_entitlement(self, email: str) -> bool:
        self.calls.append(email)
        if self.fail:
            raise LicenseProviderError("License check failed (Provider Error)")
        return email in self.entitled


class FakeEmailProvider:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.succeed = True

    async def send_otp_email(self, email: str, otp_code: str) -> bool:
        if not self.succeed:
            return False
        self.sent.append((email, otp_code))
        return True

    def last_code(self, email: str) -> Optional[str]:
        codes = [code for to, code in self.sent if to == email]
        return codes[-1] if codes else None


class FakeBlobStore:
    def __init__(self, objects: Optional[dict[str, bytes]] = None) -> None:
        self.objects = dict(objects or {})

    async def get(self, key: str) -> Optional[BlobObject]:
        body = self.objects.get(key)
        if body is None:
            return None
        return BlobObject(
            key=key, body=body, content_type="text/javascript", etag=f'"{key}"'
        )


# ── Fixtures ───────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv_store(clock) -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore(clock)


@pytest.fixture
def license_oracle() -> FakeLicenseOracle:
    return FakeLicenseOracle(entitled={"a@example.com"})


@pytest.fixture
def email_provider() -> FakeEmailProvider:
    return FakeEmailProvider()


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings()


@pytest.fixture
def settings(auth_settings) -> AppSettings:
    return AppSettings(
        redis=RedisSettings(redis_uri="redis://localhost:6379/0"),
        jwt=JWTSettings(jwt_secret=JWT_SECRET),
        auth=auth_settings,
    )
