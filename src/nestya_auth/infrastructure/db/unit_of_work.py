"""SQLAlchemy unit of work sharing one async session across auth stores."""

from __future__ import annotations

from types import TracebackType

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from nestya_auth.application.ports.auth_unit_of_work_port import (
    AuthUnitOfWorkFactory,
    AuthUnitOfWorkPort,
)
from nestya_auth.infrastructure.db.credential_store import SqlAlchemyCredentialStore
from nestya_auth.infrastructure.db.refresh_token_store import SqlAlchemyRefreshTokenStore


class SqlAlchemyAuthUnitOfWork(AuthUnitOfWorkPort):
    """Bind credential and refresh token stores to a single transaction.

    The session is opened on enter and closed on exit. Normal exit commits;
    exceptional exit rolls back and lets the exception propagate.
    """

    users: SqlAlchemyCredentialStore
    refresh_tokens: SqlAlchemyRefreshTokenStore

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> SqlAlchemyAuthUnitOfWork:
        self._session = self._session_factory()
        self.users = SqlAlchemyCredentialStore(self._session)
        self.refresh_tokens = SqlAlchemyRefreshTokenStore(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is None:
                try:
                    await self.commit()
                except Exception:
                    await self.rollback()
                    raise
            else:
                await self.rollback()
        finally:
            await self._require_session().close()
            self._session = None

    async def commit(self) -> None:
        await self._require_session().commit()

    async def rollback(self) -> None:
        await self._require_session().rollback()

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("unit of work is not active")
        return self._session


def build_unit_of_work_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> AuthUnitOfWorkFactory:
    """Return a zero-argument factory producing fresh units of work."""

    def _factory() -> SqlAlchemyAuthUnitOfWork:
        return SqlAlchemyAuthUnitOfWork(session_factory)

    return _factory
