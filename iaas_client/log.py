"""Logging setup for the iaas_client package."""

from __future__ import annotations

import logging

PACKAGE_LOGGER = "iaas_client"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}


def configure_logging(level: str = "warn", handler: logging.Handler | None = None) -> logging.Logger:
    """Set the package log level, attaching a stderr handler once.

    Args:
        level: One of debug, info, warn, error, fatal (case-insensitive).
        handler: Handler to attach instead of the default StreamHandler.

    Raises:
        ValueError: If the level name is unknown.
    """
    try:
        numeric_level = LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level '{level}'. Valid: {', '.join(LEVELS)}") from None

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)

    if handler is not None:
        logger.addHandler(handler)
    elif not logger.handlers:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(stream)

    return logger
