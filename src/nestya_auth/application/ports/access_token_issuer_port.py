"""Port for signing access tokens."""

from __future__ import annotations

from typing import Protocol


class AccessTokenIssuerPort(Protocol):
    """Access token signing contract."""

    def issue(self, subject: str) -> str:
        """Return a signed access token bound to `subject`."""
