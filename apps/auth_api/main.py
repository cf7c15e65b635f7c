"""auth-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from nestya_auth.application.services.auth_session_service import AuthSessionService
from nestya_auth.config.settings import Settings, load_settings
from nestya_auth.infrastructure.db.session import create_session_factory
from nestya_auth.infrastructure.db.unit_of_work import build_unit_of_work_factory
from nestya_auth.infrastructure.http.auth_router import build_auth_router
from nestya_auth.infrastructure.http.error_handlers import install_error_handlers
from nestya_auth.infrastructure.logging import configure_logging
from nestya_auth.infrastructure.security.jwt_token_issuer import JwtAccessTokenIssuer
from nestya_auth.infrastructure.security.password_hasher import BcryptPasswordHasher
from nestya_auth.infrastructure.security.refresh_token_generator import RefreshTokenGenerator

AUTH_API_HOST = "0.0.0.0"
AUTH_API_PORT = 8000
logger = logging.getLogger(__name__)


def build_auth_service(settings: Settings) -> AuthSessionService:
    """Build the session service with SQLAlchemy, bcrypt and JWT adapters."""

    session_factory = create_session_factory(settings.database_url)
    return AuthSessionService(
        unit_of_work=build_unit_of_work_factory(session_factory),
        password_hasher=BcryptPasswordHasher(),
        token_issuer=JwtAccessTokenIssuer(
            secret=settings.jwt_secret,
            ttl=settings.access_token_ttl,
            algorithm=settings.jwt_algorithm,
        ),
        token_generator=RefreshTokenGenerator(),
        refresh_token_ttl=settings.refresh_token_ttl,
    )


def create_app(*, auth_service: AuthSessionService | None = None) -> FastAPI:
    """Create FastAPI app exposing the auth session endpoints."""

    if auth_service is None:
        settings = load_settings()
        configure_logging(level=settings.log_level)
        auth_service = build_auth_service(settings)
        logger.info("auth_api_configured")

    app = FastAPI(title="nestya-auth")
    install_error_handlers(app)
    app.include_router(build_auth_router(auth_service=auth_service))
    return app


def run_asgi_server(*, host: str = AUTH_API_HOST, port: int = AUTH_API_PORT) -> None:
    """Run auth-api as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.auth_api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run auth-api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
