"""FastAPI router for register, login, refresh-token and logout endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response

from nestya_auth.application.dto.auth_models import (
    AuthTokensResponse,
    ErrorResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
)
from nestya_auth.application.services.auth_session_service import (
    AuthSessionService,
    AuthTokens,
    RegisterCommand,
)

AUTH_ROUTE_PREFIX = "/api/v1/auth"

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def build_auth_router(*, auth_service: AuthSessionService) -> APIRouter:
    """Build router exposing the session lifecycle endpoints."""

    router = APIRouter(prefix=AUTH_ROUTE_PREFIX, tags=["auth"], responses=_ERROR_RESPONSES)

    @router.post("/register", response_model=AuthTokensResponse)
    async def register(payload: RegisterRequest) -> AuthTokensResponse:
        tokens = await auth_service.register(
            RegisterCommand(
                first_name=payload.first_name,
                last_name=payload.last_name,
                email=payload.email,
                password=payload.password,
            )
        )
        return _to_response(tokens)

    @router.post("/login", response_model=AuthTokensResponse)
    async def login(payload: LoginRequest) -> AuthTokensResponse:
        tokens = await auth_service.login(email=payload.email, password=payload.password)
        return _to_response(tokens)

    @router.post("/refresh-token", response_model=AuthTokensResponse)
    async def refresh_token(payload: RefreshTokenRequest) -> AuthTokensResponse:
        tokens = await auth_service.refresh_token(payload.refresh_token)
        return _to_response(tokens)

    @router.post("/logout")
    async def logout(payload: RefreshTokenRequest) -> Response:
        await auth_service.logout(payload.refresh_token)
        return Response(status_code=200)

    return router


def _to_response(tokens: AuthTokens) -> AuthTokensResponse:
    return AuthTokensResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )
