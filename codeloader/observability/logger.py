"""Logging setup for loader components.

All components log through children of the ``codeloader`` logger
(``codeloader.facade``, ``codeloader.engine`` ...). Only the root logger owns a
stderr handler; children propagate to it.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional

ROOT_LOGGER_NAME = "codeloader"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.propagate = False

    if root.level == logging.NOTSET:
        root.setLevel(logging.INFO)

    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
        root.addHandler(handler)

    return root


def get_logger(component: Optional[str] = None, level: Optional[str] = None) -> logging.Logger:
    """Create (or return) a loader logger.

    Args:
        component: Child name under ``codeloader`` (e.g. "engine"). If omitted,
            the root loader logger is returned.
        level: Optional log level string (e.g. "DEBUG"). If omitted, keeps existing.

    Returns:
        Logger writing to stderr through the ``codeloader`` root handler.
    """

    root = _root_logger()
    logger = root if not component else root.getChild(component)

    if level is not None:
        logger.setLevel(level.upper())

    return logger


def configure_logging(settings: Any) -> logging.Logger:
    """Apply ``settings.observability.log_level`` to the root loader logger."""

    level = getattr(getattr(settings, "observability", None), "log_level", None)
    return get_logger(level=level)
