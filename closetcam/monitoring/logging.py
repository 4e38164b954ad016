"""Logging setup for the API server and scripts."""

from __future__ import annotations

import logging

from closetcam.config.settings import Settings, get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Client libraries log every request at INFO; one line per frame upload is noise.
_CHATTY_LOGGERS = ("httpx", "httpcore", "openai", "PIL")


def configure_logging(settings: Settings | None = None) -> int:
    """Configure the root logger from ``LOG_LEVEL`` and return the level applied."""

    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)

    library_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
    return level
