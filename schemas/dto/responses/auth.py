"""
Response DTOs for authentication endpoints.

VerifyResponse    - POST /auth/verify
ValidateResponse  - POST /auth/validate
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class VerifyResponse(BaseModel):
    """Successful verification: the token is also set as a cookie."""

    model_config = ConfigDict(populate_by_name=True)

    valid: bool = True
    token: str


class ValidateResponse(BaseModel):
    """Session check. ``email`` is only present for valid sessions."""

    model_config = ConfigDict(populate_by_name=True)

    valid: bool
    email: Optional[str] = None
