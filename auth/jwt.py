"""
JWT token creation and verification.

Tokens are HS256-signed JWTs carrying the user id (``sub``), email,
issue time and expiry.  The signing key is handed to ``TokenService``
once at startup (``config.jwt_secret``, env var: ``JWT_SECRET``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt as pyjwt

from auth.errors import ConfigurationError, TokenExpired, TokenMalformed


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    email: Optional[str]
    issued_at: datetime
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(
        self,
        secret: str,
        ttl: timedelta,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret:
            raise ConfigurationError("JWT secret is not configured")
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm
        self._clock = clock

    def issue(self, claims: Dict[str, Any], ttl: timedelta | None = None) -> str:
        """
        Sign ``claims`` into a token that expires ``ttl`` from now.

        ``claims["id"]`` becomes the ``sub`` claim.
        """
        payload = dict(claims)
        if "id" in payload:
            payload["sub"] = str(payload.pop("id"))
        if not payload.get("sub"):
            raise ValueError("token claims need a subject id")
        now = self._clock()
        payload["iat"] = int(now.timestamp())
        payload["exp"] = int((now + (ttl if ttl is not None else self.ttl)).timestamp())
        return pyjwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the embedded claims.

        A token is expired once the service clock is past ``exp``.
        Raises ``TokenExpired`` for an expired token and ``TokenMalformed``
        for anything that cannot be decoded or verified.
        """
        try:
            payload = pyjwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"], "verify_exp": False, "verify_iat": False},
            )
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
            issued_at = datetime.fromtimestamp(int(payload.get("iat", 0)), tz=timezone.utc)
        except (pyjwt.InvalidTokenError, TypeError, ValueError, OverflowError, OSError) as exc:
            raise TokenMalformed() from exc

        if self._clock() > expires_at:
            raise TokenExpired()

        return TokenClaims(
            user_id=str(payload["sub"]),
            email=payload.get("email"),
            issued_at=issued_at,
            expires_at=expires_at,
        )
