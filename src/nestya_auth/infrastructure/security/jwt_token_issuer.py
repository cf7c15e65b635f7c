"""PyJWT adapter for signing short-lived access tokens."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from nestya_auth.application.ports.access_token_issuer_port import AccessTokenIssuerPort

ACCESS_TOKEN_TYPE = "access"


class JwtAccessTokenIssuer(AccessTokenIssuerPort):
    """Sign access tokens as HMAC JWTs carrying `sub`, `iat`, `exp` and `type` claims."""

    def __init__(
        self,
        *,
        secret: str,
        ttl: timedelta,
        algorithm: str = "HS256",
        now: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("jwt secret cannot be blank")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm
        self._now = now or (lambda: datetime.now(tz=UTC))

    def issue(self, subject: str) -> str:
        issued_at = self._now()
        payload: dict[str, Any] = {
            "sub": subject,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
            "type": ACCESS_TOKEN_TYPE,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)
