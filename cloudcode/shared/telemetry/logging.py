"""Logging configuration for the webhook service."""

import logging
import sys

from cloudcode.core.config import Settings, get_settings

# Chatty at INFO; every Parse call would be logged.
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(settings: Settings | None = None) -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout.
    """
    settings = settings or get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.debug:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
