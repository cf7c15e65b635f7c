"""Port for user credential persistence operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


class DuplicateUserEmailError(ValueError):
    """Raised when the store rejects a user because the email already exists."""


@dataclass(frozen=True)
class UserCreateInput:
    """Input payload for inserting one user row."""

    user_id: UUID
    email: str
    password_hash: str
    first_name: str
    last_name: str


@dataclass(frozen=True)
class UserRecord:
    """User persistence model."""

    user_id: UUID
    email: str
    password_hash: str
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime


class CredentialStorePort(Protocol):
    """User repository contract."""

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by exact email match or None."""

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user, raising DuplicateUserEmailError on email conflict."""
