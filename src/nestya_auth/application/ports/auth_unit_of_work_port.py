"""Port for transactional access to credential and refresh token stores."""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType
from typing import Protocol

from nestya_auth.application.ports.credential_store_port import CredentialStorePort
from nestya_auth.application.ports.refresh_token_store_port import RefreshTokenStorePort


class AuthUnitOfWorkPort(Protocol):
    """One transaction shared by the user and refresh token stores.

    Leaving the context normally commits; leaving it with an exception rolls
    back whatever was not committed explicitly.
    """

    users: CredentialStorePort
    refresh_tokens: RefreshTokenStorePort

    async def __aenter__(self) -> AuthUnitOfWorkPort: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    async def commit(self) -> None:
        """Commit pending changes."""

    async def rollback(self) -> None:
        """Discard pending changes."""


AuthUnitOfWorkFactory = Callable[[], AuthUnitOfWorkPort]
