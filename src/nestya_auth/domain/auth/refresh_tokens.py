"""Refresh-token lifetime rules."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


def compute_refresh_token_expiry(*, issued_at: datetime, ttl: timedelta) -> datetime:
    """Return absolute expiry for a token issued at `issued_at`."""

    if ttl <= timedelta(0):
        raise ValueError("refresh token ttl must be positive")
    return issued_at + ttl


def is_refresh_token_expired(*, expires_at: datetime, now: datetime) -> bool:
    """Return whether a token expiring at `expires_at` is no longer usable at `now`."""

    return as_utc(expires_at) <= as_utc(now)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo) and convert aware ones."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
