"""Pure translation of domain error kinds into transport-level outcomes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from nestya_auth.application.dto.auth_models import ErrorResponse
from nestya_auth.domain.auth.errors import AuthError, AuthErrorKind


@dataclass(frozen=True)
class ErrorDescriptor:
    """Status code, stable label and caller-safe message for one error kind."""

    kind: AuthErrorKind
    status_code: int
    error: str
    message: str


_UNAUTHORIZED = "Unauthorized"

_DESCRIPTORS: dict[AuthErrorKind, ErrorDescriptor] = {
    AuthErrorKind.DUPLICATE_USER: ErrorDescriptor(
        kind=AuthErrorKind.DUPLICATE_USER,
        status_code=409,
        error="Conflict",
        message="An account with this email already exists.",
    ),
    AuthErrorKind.INVALID_CREDENTIALS: ErrorDescriptor(
        kind=AuthErrorKind.INVALID_CREDENTIALS,
        status_code=401,
        error=_UNAUTHORIZED,
        message="Invalid email or password.",
    ),
    AuthErrorKind.TOKEN_NOT_FOUND: ErrorDescriptor(
        kind=AuthErrorKind.TOKEN_NOT_FOUND,
        status_code=401,
        error=_UNAUTHORIZED,
        message="Refresh token not found or expired",
    ),
    AuthErrorKind.TOKEN_EXPIRED: ErrorDescriptor(
        kind=AuthErrorKind.TOKEN_EXPIRED,
        status_code=401,
        error=_UNAUTHORIZED,
        message="Refresh token was expired. Please make a new signin request",
    ),
    AuthErrorKind.INVALID_REQUEST: ErrorDescriptor(
        kind=AuthErrorKind.INVALID_REQUEST,
        status_code=400,
        error="Bad Request",
        message="Request body is invalid.",
    ),
    AuthErrorKind.UNEXPECTED_FAILURE: ErrorDescriptor(
        kind=AuthErrorKind.UNEXPECTED_FAILURE,
        status_code=500,
        error="Internal Server Error",
        message="An unexpected error occurred. Please try again later.",
    ),
}


def describe_error_kind(kind: AuthErrorKind) -> ErrorDescriptor:
    """Return the fixed transport outcome for one error kind."""

    return _DESCRIPTORS[kind]


def error_descriptor_for_exception(error: BaseException) -> ErrorDescriptor:
    """Resolve any raised exception to a descriptor that leaks no internals."""

    if not isinstance(error, AuthError):
        return describe_error_kind(AuthErrorKind.UNEXPECTED_FAILURE)
    return describe_error_kind(error.kind)


def build_error_response(
    descriptor: ErrorDescriptor,
    *,
    now: Callable[[], datetime] | None = None,
) -> ErrorResponse:
    """Render one descriptor into the public error body."""

    timestamp = now() if now is not None else datetime.now(tz=UTC)
    return ErrorResponse(
        timestamp=timestamp,
        status=descriptor.status_code,
        error=descriptor.error,
        message=descriptor.message,
    )
