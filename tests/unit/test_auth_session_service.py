from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from nestya_auth.application.services.auth_session_service import (
    AuthSessionService,
    AuthTokens,
    RegisterCommand,
)
from nestya_auth.domain.auth.errors import (
    DuplicateUserError,
    InvalidCredentialsError,
    TokenExpiredError,
    TokenNotFoundError,
)
from tests.unit.fakes import (
    FakeClock,
    FakePasswordHasher,
    FakeTokenIssuer,
    FakeUnitOfWork,
    InMemoryAuthDatabase,
    SequentialTokenGenerator,
    StorageFailure,
)

TTL = timedelta(days=7)
START = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


def _build(
    *,
    db: InMemoryAuthDatabase | None = None,
    issuer: FakeTokenIssuer | None = None,
    generator: SequentialTokenGenerator | None = None,
    clock: FakeClock | None = None,
) -> tuple[AuthSessionService, InMemoryAuthDatabase, FakePasswordHasher, FakeClock]:
    database = db or InMemoryAuthDatabase()
    hasher = FakePasswordHasher()
    resolved_clock = clock or FakeClock(START)
    service = AuthSessionService(
        unit_of_work=lambda: FakeUnitOfWork(database),
        password_hasher=hasher,
        token_issuer=issuer or FakeTokenIssuer(),
        token_generator=generator or SequentialTokenGenerator(),
        refresh_token_ttl=TTL,
        now=resolved_clock,
    )
    return service, database, hasher, resolved_clock


def _command(email: str = "a@x.com", password: str = "pw") -> RegisterCommand:
    return RegisterCommand(first_name="Ada", last_name="Lovelace", email=email, password=password)


@pytest.mark.asyncio
async def test_register_persists_hashed_user_and_single_refresh_token() -> None:
    service, db, _, _ = _build()

    tokens = await service.register(_command())

    assert tokens == AuthTokens(
        access_token=f"access::{next(iter(db.users))}::1",
        refresh_token="refresh-1",
    )
    (user,) = db.users.values()
    assert user.email == "a@x.com"
    assert user.password_hash == "hashed::pw"
    assert (user.first_name, user.last_name) == ("Ada", "Lovelace")
    (record,) = db.tokens_for(user.user_id)
    assert record.token_hash == "digest::refresh-1"
    assert record.expires_at == START + TTL


@pytest.mark.asyncio
async def test_register_duplicate_email_raises_and_keeps_state() -> None:
    service, db, _, _ = _build()
    await service.register(_command())

    with pytest.raises(DuplicateUserError) as exc_info:
        await service.register(_command())

    assert str(exc_info.value) == "An account with this email already exists."
    assert len(db.users) == 1
    assert len(db.tokens) == 1


@pytest.mark.asyncio
async def test_register_email_match_is_case_sensitive() -> None:
    service, db, _, _ = _build()
    await service.register(_command(email="a@x.com"))

    await service.register(_command(email="A@x.com"))

    assert {user.email for user in db.users.values()} == {"a@x.com", "A@x.com"}


@pytest.mark.asyncio
async def test_concurrent_register_same_email_yields_one_success_and_one_duplicate() -> None:
    db = InMemoryAuthDatabase(yield_on_reads=True)
    service, _, _, _ = _build(db=db)

    results = await asyncio.gather(
        service.register(_command()),
        service.register(_command()),
        return_exceptions=True,
    )

    successes = [result for result in results if isinstance(result, AuthTokens)]
    duplicates = [result for result in results if isinstance(result, DuplicateUserError)]
    assert len(successes) == 1
    assert len(duplicates) == 1
    assert len(db.users) == 1
    assert len(db.tokens) == 1


@pytest.mark.asyncio
async def test_login_success_replaces_previous_refresh_token() -> None:
    service, db, hasher, _ = _build()
    registered = await service.register(_command())

    logged_in = await service.login(email="a@x.com", password="pw")

    (user,) = db.users.values()
    assert hasher.verify_calls == [("pw", "hashed::pw")]
    assert logged_in.refresh_token != registered.refresh_token
    assert [record.token_hash for record in db.tokens_for(user.user_id)] == [
        f"digest::{logged_in.refresh_token}"
    ]
    with pytest.raises(TokenNotFoundError):
        await service.refresh_token(registered.refresh_token)


@pytest.mark.asyncio
async def test_login_wrong_password_and_unknown_email_share_generic_error() -> None:
    service, db, hasher, _ = _build()
    await service.register(_command())
    tokens_before = dict(db.tokens)

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        await service.login(email="a@x.com", password="nope")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        await service.login(email="missing@x.com", password="pw")

    assert str(wrong_password.value) == str(unknown_email.value) == "Invalid email or password."
    assert hasher.verify_calls == [("nope", "hashed::pw")]
    assert db.tokens == tokens_before


@pytest.mark.asyncio
async def test_refresh_rotates_token_and_rejects_replay() -> None:
    service, db, _, clock = _build()
    first = await service.register(_command())
    clock.advance(timedelta(hours=1))

    second = await service.refresh_token(first.refresh_token)

    (user,) = db.users.values()
    assert second.refresh_token != first.refresh_token
    assert second.access_token != first.access_token
    (record,) = db.tokens_for(user.user_id)
    assert record.token_hash == f"digest::{second.refresh_token}"
    assert record.expires_at == START + timedelta(hours=1) + TTL

    with pytest.raises(TokenNotFoundError):
        await service.refresh_token(first.refresh_token)
    assert db.tokens_for(user.user_id) == [record]


@pytest.mark.asyncio
async def test_refresh_unknown_token_raises_not_found() -> None:
    service, _, _, _ = _build()

    with pytest.raises(TokenNotFoundError) as exc_info:
        await service.refresh_token("never-issued")

    assert str(exc_info.value) == "Refresh token not found or expired"


@pytest.mark.asyncio
async def test_refresh_expired_token_deletes_row_then_reports_not_found() -> None:
    service, db, _, clock = _build()
    tokens = await service.register(_command())
    clock.advance(TTL + timedelta(seconds=60))

    with pytest.raises(TokenExpiredError) as exc_info:
        await service.refresh_token(tokens.refresh_token)

    assert "expired" in str(exc_info.value)
    assert db.tokens == {}
    with pytest.raises(TokenNotFoundError):
        await service.refresh_token(tokens.refresh_token)


@pytest.mark.asyncio
async def test_refresh_at_exact_expiry_instant_counts_as_expired() -> None:
    service, db, _, clock = _build()
    tokens = await service.register(_command())
    clock.advance(TTL)

    with pytest.raises(TokenExpiredError):
        await service.refresh_token(tokens.refresh_token)

    assert db.tokens == {}


@pytest.mark.asyncio
async def test_concurrent_refresh_with_same_token_allows_single_winner() -> None:
    db = InMemoryAuthDatabase()
    service, _, _, _ = _build(db=db)
    tokens = await service.register(_command())
    db.yield_on_reads = True

    results = await asyncio.gather(
        service.refresh_token(tokens.refresh_token),
        service.refresh_token(tokens.refresh_token),
        return_exceptions=True,
    )

    winners = [result for result in results if isinstance(result, AuthTokens)]
    losers = [result for result in results if isinstance(result, TokenNotFoundError)]
    assert len(winners) == 1
    assert len(losers) == 1
    (user,) = db.users.values()
    assert [record.token_hash for record in db.tokens_for(user.user_id)] == [
        f"digest::{winners[0].refresh_token}"
    ]


@pytest.mark.asyncio
async def test_failed_signing_rolls_back_rotation() -> None:
    issuer = FakeTokenIssuer()
    service, db, _, _ = _build(issuer=issuer)
    tokens = await service.register(_command())
    issuer.fail = True

    with pytest.raises(StorageFailure):
        await service.refresh_token(tokens.refresh_token)

    (user,) = db.users.values()
    assert [record.token_hash for record in db.tokens_for(user.user_id)] == [
        f"digest::{tokens.refresh_token}"
    ]
    assert db.rollbacks == 1


@pytest.mark.asyncio
async def test_register_rolls_back_user_when_session_issue_fails() -> None:
    service, db, _, _ = _build(issuer=FakeTokenIssuer(fail=True))

    with pytest.raises(StorageFailure):
        await service.register(_command())

    assert db.users == {}
    assert db.tokens == {}


@pytest.mark.asyncio
async def test_refresh_token_value_collision_surfaces_as_storage_failure() -> None:
    generator = SequentialTokenGenerator(values=["same", "same"])
    service, db, _, _ = _build(generator=generator)
    await service.register(_command(email="first@x.com"))

    with pytest.raises(StorageFailure):
        await service.register(_command(email="second@x.com"))

    assert {user.email for user in db.users.values()} == {"first@x.com"}


@pytest.mark.asyncio
async def test_logout_is_idempotent_and_accepts_unknown_tokens() -> None:
    service, db, _, _ = _build()
    tokens = await service.register(_command())

    await service.logout(tokens.refresh_token)
    await service.logout(tokens.refresh_token)
    await service.logout("never-issued")

    assert db.tokens == {}
    with pytest.raises(TokenNotFoundError):
        await service.refresh_token(tokens.refresh_token)


@pytest.mark.asyncio
async def test_any_sequence_leaves_exactly_one_token_per_user() -> None:
    service, db, _, clock = _build()
    tokens = await service.register(_command())
    await service.register(_command(email="other@x.com"))

    for _ in range(3):
        clock.advance(timedelta(minutes=5))
        tokens = await service.refresh_token(tokens.refresh_token)
        tokens = await service.login(email="a@x.com", password="pw")

    issued_values = {record.token_hash for record in db.tokens.values()}
    assert len(db.tokens) == 2
    assert f"digest::{tokens.refresh_token}" in issued_values
    for user in db.users.values():
        assert len(db.tokens_for(user.user_id)) == 1


@pytest.mark.asyncio
async def test_purge_removes_only_expired_tokens() -> None:
    service, db, _, clock = _build()
    await service.register(_command(email="old@x.com"))
    clock.advance(TTL - timedelta(minutes=1))
    fresh = await service.register(_command(email="new@x.com"))
    clock.advance(timedelta(minutes=1))

    removed = await service.purge_expired_refresh_tokens()

    assert removed == 1
    assert list(db.tokens) == [f"digest::{fresh.refresh_token}"]


def test_non_positive_ttl_is_rejected() -> None:
    db = InMemoryAuthDatabase()
    with pytest.raises(ValueError):
        AuthSessionService(
            unit_of_work=lambda: FakeUnitOfWork(db),
            password_hasher=FakePasswordHasher(),
            token_issuer=FakeTokenIssuer(),
            token_generator=SequentialTokenGenerator(),
            refresh_token_ttl=timedelta(0),
        )
