"""Port for refresh token persistence operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class RefreshTokenCreateInput:
    """Input payload for inserting a refresh token record."""

    user_id: UUID
    token_hash: str
    expires_at: datetime


@dataclass(frozen=True)
class RefreshTokenRecord:
    """Persisted refresh token model."""

    id: int
    user_id: UUID
    token_hash: str
    issued_at: datetime
    expires_at: datetime


class RefreshTokenStorePort(Protocol):
    """Refresh token persistence contract."""

    async def create_token(self, payload: RefreshTokenCreateInput) -> RefreshTokenRecord:
        """Persist a new refresh token record."""

    async def get_by_hash(self, *, token_hash: str) -> RefreshTokenRecord | None:
        """Return token record by hash regardless of expiry, or None."""

    async def list_for_user(self, *, user_id: UUID) -> list[RefreshTokenRecord]:
        """Return every token record owned by one user."""

    async def delete_by_hash(self, *, token_hash: str) -> bool:
        """Delete one token by hash and return whether a row was removed."""

    async def delete_for_user(self, *, user_id: UUID) -> int:
        """Delete every token owned by one user and return affected count."""

    async def delete_expired(self, *, now: datetime) -> int:
        """Delete tokens expiring at or before `now` and return affected count."""
