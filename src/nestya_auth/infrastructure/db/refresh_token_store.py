"""SQLAlchemy adapter for refresh token persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from nestya_auth.application.ports.refresh_token_store_port import (
    RefreshTokenCreateInput,
    RefreshTokenRecord,
    RefreshTokenStorePort,
)
from nestya_auth.domain.auth.refresh_tokens import as_utc
from nestya_auth.infrastructure.db.metadata import refresh_tokens


class SqlAlchemyRefreshTokenStore(RefreshTokenStorePort):
    """Refresh token store bound to the caller's SQLAlchemy async session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_token(self, payload: RefreshTokenCreateInput) -> RefreshTokenRecord:
        """Persist a token hash row and return the inserted token record."""

        statement = sa.insert(refresh_tokens).values(
            user_id=payload.user_id,
            token_hash=payload.token_hash,
            expires_at=payload.expires_at,
        ).returning(*refresh_tokens.c)

        result = await self._session.execute(statement)

        row = result.mappings().one()
        return _to_refresh_token_record(row)

    async def get_by_hash(self, *, token_hash: str) -> RefreshTokenRecord | None:
        """Return token by hash, expired or not."""

        statement = sa.select(*refresh_tokens.c).where(
            refresh_tokens.c.token_hash == token_hash,
        ).limit(1)
        result = await self._session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_refresh_token_record(row)

    async def list_for_user(self, *, user_id: UUID) -> list[RefreshTokenRecord]:
        """Return tokens of one user ordered by insertion."""

        statement = (
            sa.select(*refresh_tokens.c)
            .where(refresh_tokens.c.user_id == user_id)
            .order_by(refresh_tokens.c.id)
        )
        result = await self._session.execute(statement)

        return [_to_refresh_token_record(row) for row in result.mappings().all()]

    async def delete_by_hash(self, *, token_hash: str) -> bool:
        """Delete one token by hash and report whether this call removed it."""

        statement = sa.delete(refresh_tokens).where(refresh_tokens.c.token_hash == token_hash)
        result = cast(CursorResult[Any], await self._session.execute(statement))

        return int(result.rowcount or 0) == 1

    async def delete_for_user(self, *, user_id: UUID) -> int:
        """Delete all tokens of one user through the user_id index."""

        statement = sa.delete(refresh_tokens).where(refresh_tokens.c.user_id == user_id)
        result = cast(CursorResult[Any], await self._session.execute(statement))

        return int(result.rowcount or 0)

    async def delete_expired(self, *, now: datetime) -> int:
        """Delete tokens whose expiry is at or before `now`."""

        statement = sa.delete(refresh_tokens).where(refresh_tokens.c.expires_at <= now)
        result = cast(CursorResult[Any], await self._session.execute(statement))

        return int(result.rowcount or 0)


def _to_refresh_token_record(row: sa.RowMapping) -> RefreshTokenRecord:
    raw_user_id = row["user_id"]
    user_id = raw_user_id if isinstance(raw_user_id, UUID) else UUID(str(raw_user_id))
    return RefreshTokenRecord(
        id=int(row["id"]),
        user_id=user_id,
        token_hash=cast(str, row["token_hash"]),
        issued_at=as_utc(cast(datetime, row["issued_at"])),
        expires_at=as_utc(cast(datetime, row["expires_at"])),
    )
