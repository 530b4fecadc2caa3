"""
Unit tests for the shared/ utility modules.

Covers:
- shared.validators      (normalize_email, validate_email, validate_otp_code)
- shared.generators      (generate_otp_code, generate_request_id)
- shared.datetime_utils  (utc_day, format_retry_window)
- shared.logging         (mask_email, hash_ip, redact_sensitive_fields)
- shared.log_context     (get_client_ip)
"""

from __future__ import annotations

import string
from unittest.mock import MagicMock

import pytest

from shared.datetime_utils import format_retry_window, utc_day
from shared.generators import generate_otp_code, generate_request_id
from shared.log_context import get_client_ip
from shared.logging import hash_ip, mask_email, redact_sensitive_fields
from shared.validators import normalize_email, validate_email, validate_otp_code


def _make_request(headers: dict, client_host: str = "10.0.0.1") -> MagicMock:
    """Minimal mock of a FastAPI Request."""
    req = MagicMock()
    req.headers = headers
    req.client = MagicMock()
    req.client.host = client_host
    return req


# ---------------------------------------------------------------------------
# shared.validators
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "email, expected",
    [
        ("jane@example.com", True),
        ("jane.doe+tag@mail.example.org", True),
        ("not-an-email", False),
        ("jane@", False),
        ("@example.com", False),
        ("", False),
        ("a" * 250 + "@example.com", False),
    ],
    ids=["plain", "plus_tag", "no_at", "no_domain", "no_local", "empty", "too_long"],
)
def test_validate_email(email, expected):
    assert validate_email(email) is expected


def test_normalize_email():
    assert normalize_email("  Jane@Example.COM ") == "jane@example.com"


@pytest.mark.parametrize(
    "code, expected",
    [
        ("123456", True),
        ("000000", True),
        ("12345", False),
        ("1234567", False),
        ("12a456", False),
        ("123456\n", False),
        ("", False),
    ],
    ids=["digits", "zeros", "short", "long", "letter", "trailing_newline", "empty"],
)
def test_validate_otp_code(code, expected):
    assert validate_otp_code(code) is expected


# ---------------------------------------------------------------------------
# shared.generators
# ---------------------------------------------------------------------------


def test_generate_otp_code_shape():
    code = generate_otp_code()
    assert len(code) == 6
    assert all(c in string.digits for c in code)


def test_generate_otp_code_custom_length():
    assert len(generate_otp_code(8)) == 8


def test_generate_otp_code_is_random():
    assert len({generate_otp_code() for _ in range(50)}) > 1


def test_generate_request_id():
    rid = generate_request_id()
    assert rid.startswith("req_")
    assert len(rid) == 16


# ---------------------------------------------------------------------------
# shared.datetime_utils
# ---------------------------------------------------------------------------


def test_utc_day():
    assert utc_day(1741953600.0) == "2025-03-14"


def test_utc_day_rolls_over_at_midnight_utc():
    midnight = 1741996800.0  # 2025-03-15T00:00:00Z
    assert utc_day(midnight - 1) == "2025-03-14"
    assert utc_day(midnight) == "2025-03-15"


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (86400, "24h"),
        (86399, "24h"),
        (3601, "2h"),
        (3600, "1h"),
        (900, "15m"),
        (5, "1m"),
    ],
)
def test_format_retry_window(seconds, expected):
    assert format_retry_window(seconds) == expected


# ---------------------------------------------------------------------------
# shared.logging
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "email, expected",
    [
        ("jane@example.com", "j***@example.com"),
        ("not-an-email", "***"),
        (None, None),
    ],
)
def test_mask_email(email, expected):
    assert mask_email(email) == expected


def test_hash_ip():
    hashed = hash_ip("203.0.113.7")
    assert len(hashed) == 16
    assert hashed != "203.0.113.7"
    assert hash_ip(None) is None


def test_redact_sensitive_fields():
    event = {
        "event": "session_issued",
        "level": "info",
        "token": "eyJ...",
        "code": "123456",
        "jwt_secret": "x",
        "api_key": "y",
        "status_code": 200,
        "email": "j***@example.com",
    }
    out = redact_sensitive_fields(None, "info", dict(event))
    assert out["token"] == "***REDACTED***"
    assert out["code"] == "***REDACTED***"
    assert out["jwt_secret"] == "***REDACTED***"
    assert out["api_key"] == "***REDACTED***"
    assert out["status_code"] == 200
    assert out["email"] == "j***@example.com"
    assert out["event"] == "session_issued"


# ---------------------------------------------------------------------------
# shared.log_context
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "headers, expected",
    [
        ({"CF-Connecting-IP": "1.1.1.1"}, "1.1.1.1"),
        ({"X-Forwarded-For": "2.2.2.2, 10.0.0.1"}, "2.2.2.2"),
        ({"X-Real-IP": "3.3.3.3"}, "3.3.3.3"),
        ({}, "10.0.0.1"),
    ],
    ids=["cloudflare", "forwarded_for", "real_ip", "socket_peer"],
)
def test_get_client_ip(headers, expected):
    assert get_client_ip(_make_request(headers)) == expected
