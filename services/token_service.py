"""
Session token minting and verification.

Tokens are HS256 JWTs built by PyJWT: header ``{alg, typ}``, payload
``{sub, iat, exp}``, base64url segments without padding. PyJWT compares
signatures in constant time; expiry is checked against the service clock.

Verification fails closed and uniformly: a missing segment, a bad signature,
an unreadable payload and an expired token all return None. Nothing is stored
server-side, so a token stays valid until ``exp`` regardless of later
entitlement changes.
"""

from __future__ import annotations

from typing import Optional

import jwt

from schemas.models.session import IssuedToken, SessionClaims
from shared.datetime_utils import Clock, system_clock
from shared.logging import get_logger

log = get_logger(__name__)

_ALGORITHM = "HS256"


class TokenService:
    def __init__(
        self,
        secret: str,
        ttl_seconds: int = 604800,
        clock: Clock = system_clock,
    ) -> None:
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def mint(self, subject: str) -> IssuedToken:
        now = int(self._clock())
        expires_at = now + self.ttl_seconds
        token = jwt.encode(
            {"sub": subject, "iat": now, "exp": expires_at},
            self._secret,
            algorithm=_ALGORITHM,
        )
        return IssuedToken(token=token, subject=subject, expires_at=expires_at)

    def verify(self, token: Optional[str]) -> Optional[SessionClaims]:
        if not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={
                    "require": ["sub", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as e:
            log.info("session_token_rejected", reason=type(e).__name__)
            return None

        expires_at = claims["exp"]
        if not isinstance(expires_at, (int, float)) or self._clock() > expires_at:
            log.info("session_token_rejected", reason="expired")
            return None
        return SessionClaims(subject=claims["sub"], expires_at=int(expires_at))
