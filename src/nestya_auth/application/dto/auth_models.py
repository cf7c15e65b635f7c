"""Pydantic models for the authentication HTTP contract."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection and camelCase wire names."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class RegisterRequest(StrictModel):
    """HTTP request model for account registration."""

    first_name: str = Field(alias="firstName", min_length=1)
    last_name: str = Field(alias="lastName", min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginRequest(StrictModel):
    """HTTP request model for credential login."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RefreshTokenRequest(StrictModel):
    """HTTP request model carrying one refresh token value."""

    refresh_token: str = Field(alias="refreshToken")


class AuthTokensResponse(StrictModel):
    """HTTP response model for any successful session issue."""

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")


class ErrorResponse(StrictModel):
    """Stable error body returned for every failed request."""

    timestamp: datetime
    status: int
    error: str
    message: str
