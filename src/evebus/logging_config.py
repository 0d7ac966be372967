import logging
import os
from typing import Optional, TextIO

LOG_LEVEL_ENV = "EVEBUS_LOG_LEVEL"
PACKAGE_LOGGER = "evebus"


def resolve_level(default_level: int) -> int:
    """Return the level named by EVEBUS_LOG_LEVEL, or ``default_level``."""
    level_name = os.getenv(LOG_LEVEL_ENV)
    if not level_name:
        return default_level
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else default_level


def configure_logging(default_level: int = logging.INFO, stream: Optional[TextIO] = None) -> int:
    """Install a root handler and set the evebus package log level.

    EVEBUS_LOG_LEVEL only tunes the ``evebus`` loggers, so bus tracing can be
    switched to DEBUG without raising the verbosity of the host application.
    Returns the level applied to the package logger.
    """
    logging.basicConfig(
        level=default_level,
        stream=stream,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
    level = resolve_level(default_level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    return level
