"""Domain error taxonomy for authentication and session renewal."""

from __future__ import annotations

from enum import StrEnum


class AuthErrorKind(StrEnum):
    """Stable error kinds surfaced at the authentication boundary."""

    DUPLICATE_USER = "duplicate_user"
    INVALID_CREDENTIALS = "invalid_credentials"
    TOKEN_NOT_FOUND = "token_not_found"
    TOKEN_EXPIRED = "token_expired"
    INVALID_REQUEST = "invalid_request"
    UNEXPECTED_FAILURE = "unexpected_failure"


class AuthError(Exception):
    """Base class for domain failures raised by the auth orchestrator."""

    kind: AuthErrorKind = AuthErrorKind.UNEXPECTED_FAILURE
    default_message = "An unexpected error occurred. Please try again later."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class DuplicateUserError(AuthError):
    """Raised when registration targets an email that already has an account."""

    kind = AuthErrorKind.DUPLICATE_USER
    default_message = "An account with this email already exists."


class InvalidCredentialsError(AuthError):
    """Raised when login credentials do not match a stored account."""

    kind = AuthErrorKind.INVALID_CREDENTIALS
    default_message = "Invalid email or password."


class TokenNotFoundError(AuthError):
    """Raised when a refresh token value is unknown or already consumed."""

    kind = AuthErrorKind.TOKEN_NOT_FOUND
    default_message = "Refresh token not found or expired"


class TokenExpiredError(AuthError):
    """Raised when a stored refresh token is past its expiry."""

    kind = AuthErrorKind.TOKEN_EXPIRED
    default_message = "Refresh token was expired. Please make a new signin request"
