"""
Random code generators - pure, side-effect-free functions.

All generators use cryptographically secure sources (``secrets`` module).
"""

from __future__ import annotations

import secrets
import string


def generate_otp_code(length: int = 6) -> str:
    """Generate a cryptographically secure numeric OTP.

    Every digit is drawn independently, so all ``10 ** length`` codes are
    equally likely, including ones with leading zeros.

    Args:
        length: Number of digits (default 6).

    Returns:
        String of random decimal digits.
    """
    return "".join(secrets.choice(string.digits) for _ in range(length))


def generate_request_id() -> str:
    """Generate a short request ID for log correlation."""
    return f"req_{secrets.token_hex(6)}"
