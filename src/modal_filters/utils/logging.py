"""Package logger for filter edits and routing."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .constants import LOG_FORMAT, LOGGER_NAME


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _drop_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        try:
            handler.flush()
            handler.close()
        finally:
            logger.removeHandler(handler)


def configure_logger(
    log_path: Optional[Path] = None,
    *,
    console: bool = True,
    level: int = logging.INFO,
) -> logging.Logger:
    """Route edit-session messages to ``log_path`` and/or the console.

    Calling this again replaces the previous handlers, so a session can move
    its log without duplicating lines. Records stop propagating to the root
    logger once configured.
    """
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    _drop_handlers(logger)

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = []
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    if console:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
