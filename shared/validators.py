"""
Input validators - framework-agnostic, pure functions.
"""

from __future__ import annotations

import re

import validators as _validators

_OTP_PATTERN = re.compile(r"[0-9]{6}")


def normalize_email(email: str) -> str:
    """Strip surrounding whitespace and lower-case *email*.

    The normalised form is the identity used for counters, lockouts, and
    stored documents.
    """
    return email.strip().lower()


def validate_email(email: str) -> bool:
    """Return True if *email* is a syntactically valid address."""
    if not email or len(email) > 254:
        return False
    return bool(_validators.email(email))


def validate_otp_code(code: str) -> bool:
    """Return True if *code* is exactly six decimal digits."""
    return bool(_OTP_PATTERN.fullmatch(code or ""))
