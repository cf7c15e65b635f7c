"""Process logging configuration for the auth service entrypoints."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_CHATTY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "uvicorn.access")


def configure_logging(*, level: str) -> None:
    """Configure root logging once; third-party loggers stay at WARNING unless DEBUG."""

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved_level = getattr(logging, normalized_level, logging.INFO)

    logging.basicConfig(
        level=resolved_level,
        format=_LOG_FORMAT,
    )
    if resolved_level > logging.DEBUG:
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
