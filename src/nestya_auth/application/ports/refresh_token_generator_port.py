"""Port for opaque refresh token generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class GeneratedRefreshToken:
    """Raw token value handed to the client and the digest persisted for lookup."""

    value: str
    token_hash: str


class RefreshTokenGeneratorPort(Protocol):
    """Refresh token generation/hashing contract."""

    def generate(self) -> GeneratedRefreshToken:
        """Return a fresh unguessable token value together with its digest."""

    def hash_token(self, value: str) -> str:
        """Return the persisted digest for one presented token value."""
