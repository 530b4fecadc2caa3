"""
Request DTOs for authentication endpoints.

AuthInitRequest    - POST /auth/init
AuthVerifyRequest  - POST /auth/verify

Fields are plain strings; format checks happen in the service layer so every
malformed input yields the same 400 shape.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AuthInitRequest(BaseModel):
    """Request body for POST /auth/init."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = ""


class AuthVerifyRequest(BaseModel):
    """Request body for POST /auth/verify.

    ``code`` is the 6-digit OTP sent to ``email``.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str = ""
    code: str = ""
