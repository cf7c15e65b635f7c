"""Opaque refresh token generation and hashing."""

from __future__ import annotations

import hashlib
import secrets
from collections.abc import Callable

from nestya_auth.application.ports.refresh_token_generator_port import (
    GeneratedRefreshToken,
    RefreshTokenGeneratorPort,
)

_TOKEN_BYTES = 32


class RefreshTokenGenerator(RefreshTokenGeneratorPort):
    """Generate 256-bit URL-safe refresh token values and their SHA-256 digests."""

    def __init__(self, *, token_factory: Callable[[], str] | None = None) -> None:
        self._token_factory = token_factory or (lambda: secrets.token_urlsafe(_TOKEN_BYTES))

    def generate(self) -> GeneratedRefreshToken:
        value = self._token_factory()
        return GeneratedRefreshToken(value=value, token_hash=self.hash_token(value))

    def hash_token(self, value: str) -> str:
        return hashlib.sha256(value.encode("utf-8")).hexdigest()
