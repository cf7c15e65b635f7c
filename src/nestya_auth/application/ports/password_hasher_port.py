"""Port for one-way hashing of account passwords."""

from __future__ import annotations

from typing import Protocol


class PasswordHasherPort(Protocol):
    """Turns registration passwords into stored hashes and checks login attempts."""

    def hash_password(self, password: str) -> str:
        """Return a salted hash suitable for the users.password_hash column."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Return whether a login password matches the stored hash; never raises on mismatch."""
