"""Application service for registration, login, refresh rotation and logout."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from nestya_auth.application.ports.access_token_issuer_port import AccessTokenIssuerPort
from nestya_auth.application.ports.auth_unit_of_work_port import (
    AuthUnitOfWorkFactory,
    AuthUnitOfWorkPort,
)
from nestya_auth.application.ports.credential_store_port import (
    DuplicateUserEmailError,
    UserCreateInput,
    UserRecord,
)
from nestya_auth.application.ports.password_hasher_port import PasswordHasherPort
from nestya_auth.application.ports.refresh_token_generator_port import (
    RefreshTokenGeneratorPort,
)
from nestya_auth.application.ports.refresh_token_store_port import RefreshTokenCreateInput
from nestya_auth.domain.auth.errors import (
    DuplicateUserError,
    InvalidCredentialsError,
    TokenExpiredError,
    TokenNotFoundError,
)
from nestya_auth.domain.auth.refresh_tokens import (
    compute_refresh_token_expiry,
    is_refresh_token_expired,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisterCommand:
    """Registration input after transport validation."""

    first_name: str
    last_name: str
    email: str
    password: str


@dataclass(frozen=True)
class AuthTokens:
    """Freshly issued access token paired with the current refresh token value."""

    access_token: str
    refresh_token: str


class AuthSessionService:
    """Issue, rotate and revoke sessions while keeping one refresh token per user.

    Every public operation runs inside a single unit of work, so a failure
    part-way through never leaves a user with zero or two live refresh tokens.
    """

    def __init__(
        self,
        *,
        unit_of_work: AuthUnitOfWorkFactory,
        password_hasher: PasswordHasherPort,
        token_issuer: AccessTokenIssuerPort,
        token_generator: RefreshTokenGeneratorPort,
        refresh_token_ttl: timedelta,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        if refresh_token_ttl <= timedelta(0):
            raise ValueError("refresh_token_ttl must be positive")
        self._unit_of_work = unit_of_work
        self._password_hasher = password_hasher
        self._token_issuer = token_issuer
        self._token_generator = token_generator
        self._refresh_token_ttl = refresh_token_ttl
        self._now = now or (lambda: datetime.now(tz=UTC))

    async def register(self, command: RegisterCommand) -> AuthTokens:
        """Create one account and open its first session."""

        async with self._unit_of_work() as uow:
            if await uow.users.get_by_email(email=command.email) is not None:
                logger.info("auth_register_rejected reason=duplicate_email")
                raise DuplicateUserError()

            try:
                user = await uow.users.create_user(
                    UserCreateInput(
                        user_id=uuid4(),
                        email=command.email,
                        password_hash=self._password_hasher.hash_password(command.password),
                        first_name=command.first_name,
                        last_name=command.last_name,
                    )
                )
            except DuplicateUserEmailError as error:
                logger.info("auth_register_rejected reason=duplicate_email_constraint")
                raise DuplicateUserError() from error

            tokens = await self._issue_session(uow, user)

        logger.info("auth_register_succeeded user_id=%s", user.user_id)
        return tokens

    async def login(self, *, email: str, password: str) -> AuthTokens:
        """Verify credentials and replace any existing session of the user."""

        async with self._unit_of_work() as uow:
            user = await uow.users.get_by_email(email=email)
            if user is None or not self._password_hasher.verify_password(
                password=password,
                password_hash=user.password_hash,
            ):
                logger.info("auth_login_failed reason=invalid_credentials")
                raise InvalidCredentialsError()

            tokens = await self._issue_session(uow, user)

        logger.info("auth_login_succeeded user_id=%s", user.user_id)
        return tokens

    async def refresh_token(self, token_value: str) -> AuthTokens:
        """Consume one refresh token and issue a new access/refresh pair."""

        token_hash = self._token_generator.hash_token(token_value)

        async with self._unit_of_work() as uow:
            record = await uow.refresh_tokens.get_by_hash(token_hash=token_hash)
            if record is None:
                logger.info("auth_refresh_rejected reason=not_found")
                raise TokenNotFoundError()

            if is_refresh_token_expired(expires_at=record.expires_at, now=self._now()):
                await uow.refresh_tokens.delete_by_hash(token_hash=token_hash)
                await uow.commit()
                logger.info("auth_refresh_rejected reason=expired user_id=%s", record.user_id)
                raise TokenExpiredError()

            # Zero rows means a concurrent refresh consumed this token first.
            if not await uow.refresh_tokens.delete_by_hash(token_hash=token_hash):
                logger.info("auth_refresh_rejected reason=already_rotated")
                raise TokenNotFoundError()

            user = await uow.users.get_by_id(user_id=record.user_id)
            if user is None:
                raise TokenNotFoundError()

            tokens = await self._issue_session(uow, user)

        logger.info("auth_refresh_succeeded user_id=%s", user.user_id)
        return tokens

    async def logout(self, token_value: str) -> None:
        """Revoke one refresh token; unknown values are accepted silently."""

        token_hash = self._token_generator.hash_token(token_value)
        async with self._unit_of_work() as uow:
            removed = await uow.refresh_tokens.delete_by_hash(token_hash=token_hash)

        logger.info("auth_logout_completed removed=%s", removed)

    async def purge_expired_refresh_tokens(self) -> int:
        """Delete every refresh token already past expiry and return the count."""

        async with self._unit_of_work() as uow:
            removed = await uow.refresh_tokens.delete_expired(now=self._now())

        logger.info("auth_refresh_tokens_purged count=%s", removed)
        return removed

    async def _issue_session(self, uow: AuthUnitOfWorkPort, user: UserRecord) -> AuthTokens:
        """Drop the user's previous refresh tokens, persist a new one and sign access."""

        await uow.refresh_tokens.delete_for_user(user_id=user.user_id)

        generated = self._token_generator.generate()
        await uow.refresh_tokens.create_token(
            RefreshTokenCreateInput(
                user_id=user.user_id,
                token_hash=generated.token_hash,
                expires_at=compute_refresh_token_expiry(
                    issued_at=self._now(),
                    ttl=self._refresh_token_ttl,
                ),
            )
        )

        access_token = self._token_issuer.issue(str(user.user_id))
        return AuthTokens(access_token=access_token, refresh_token=generated.value)
