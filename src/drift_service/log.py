"""Logging setup for the command-line entry point."""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "drift_service"
LOG_LEVEL_ENV = "IAC_DRIFT_LOG_LEVEL"


def _resolve_level() -> int:
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if raw:
        level = logging.getLevelName(raw)
        if isinstance(level, int):
            return level
    return logging.WARNING


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configure the package logger; ``--verbose``/``--quiet`` override the environment."""

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = _resolve_level()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    return logger


__all__ = ["LOGGER_NAME", "LOG_LEVEL_ENV", "configure_logging"]
