"""Logging configuration for the board server.

All modules log under the ``termbbs`` logger hierarchy. ``setup_logging``
gives that hierarchy its own handlers (stderr, plus an optional log
file) and stops records propagating to the root logger, so the server's
output format does not depend on whatever the host process configured.

Calling it again replaces the handlers it installed earlier instead of
stacking more of them.
"""

from __future__ import annotations

import logging
import sys

from termbbs.config.settings import LoggingConfig

PACKAGE_LOGGER = "termbbs"

# Marks handlers owned by setup_logging so a re-run only removes its own
_OWNED_ATTR = "_termbbs_owned"


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Install the server's log handlers and return the package logger.

    Args:
        config: Level, format and optional log file. Defaults to INFO on
                stderr.
    """
    config = config or LoggingConfig()
    logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in [h for h in logger.handlers if getattr(h, _OWNED_ATTR, False)]:
        logger.removeHandler(handler)
        handler.close()

    level = logging.getLevelName(config.level.upper())
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    logger.propagate = False

    formatter = logging.Formatter(config.format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _OWNED_ATTR, True)
        logger.addHandler(handler)

    logger.debug("Logging configured: level=%s file=%s", config.level, config.file or "-")
    return logger
