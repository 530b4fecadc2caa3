"""
Session token models.

Tokens are never stored server-side; these models describe what is signed
into them (SessionClaims) and what the mint operation hands back
(IssuedToken).
"""

from __future__ import annotations

from pydantic import BaseModel


class SessionClaims(BaseModel):
    """Claims recovered from a verified token. ``subject`` is the email."""

    subject: str
    expires_at: int  # epoch seconds


class IssuedToken(BaseModel):
    token: str
    subject: str
    expires_at: int  # epoch seconds
