"""One-shot command deleting refresh tokens that are already past expiry."""

from __future__ import annotations

import asyncio
import logging

from apps.auth_api.main import build_auth_service
from nestya_auth.application.services.auth_session_service import AuthSessionService
from nestya_auth.config.settings import load_settings
from nestya_auth.infrastructure.logging import configure_logging

logger = logging.getLogger(__name__)


async def run_purge(*, auth_service: AuthSessionService) -> int:
    """Purge expired refresh tokens once and return the removed count."""

    removed = await auth_service.purge_expired_refresh_tokens()
    logger.info("token_purge_finished removed=%s", removed)
    return removed


def main() -> None:
    """Load settings, build the service and run one purge pass."""

    settings = load_settings()
    configure_logging(level=settings.log_level)
    asyncio.run(run_purge(auth_service=build_auth_service(settings)))


if __name__ == "__main__":
    main()
