"""
One-time-passcode challenge stored under ``otp:{email}``.

At most one live challenge exists per email; issuing a new code overwrites
it. ``attempts`` counts failed verifications against this challenge.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class OtpChallenge(BaseModel):
    email: str
    code: str
    attempts: int = Field(default=0, ge=0)
