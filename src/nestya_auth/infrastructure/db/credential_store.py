"""SQLAlchemy adapter for user credential persistence."""

from __future__ import annotations

from datetime import datetime
from typing import cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nestya_auth.application.ports.credential_store_port import (
    CredentialStorePort,
    DuplicateUserEmailError,
    UserCreateInput,
    UserRecord,
)
from nestya_auth.infrastructure.db.metadata import users


def _is_duplicate_email_error(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "email" in message


class SqlAlchemyCredentialStore(CredentialStorePort):
    """User store bound to the caller's SQLAlchemy async session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

        statement = sa.select(*users.c).where(users.c.id == user_id).limit(1)
        result = await self._session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by exact email match or None."""

        statement = sa.select(*users.c).where(users.c.email == email).limit(1)
        result = await self._session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user row and return the persisted record."""

        statement = sa.insert(users).values(
            id=payload.user_id,
            email=payload.email,
            password_hash=payload.password_hash,
            first_name=payload.first_name,
            last_name=payload.last_name,
        ).returning(*users.c)

        try:
            result = await self._session.execute(statement)
        except IntegrityError as error:
            if _is_duplicate_email_error(error):
                raise DuplicateUserEmailError("Duplicate users.email") from error
            raise

        row = result.mappings().one()
        return _to_user_record(row)


def _to_user_record(row: sa.RowMapping) -> UserRecord:
    raw_user_id = row["id"]
    user_id = raw_user_id if isinstance(raw_user_id, UUID) else UUID(str(raw_user_id))
    return UserRecord(
        user_id=user_id,
        email=cast(str, row["email"]),
        password_hash=cast(str, row["password_hash"]),
        first_name=cast(str, row["first_name"]),
        last_name=cast(str, row["last_name"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
