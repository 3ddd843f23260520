"""Centralized logging helpers shared by the daemon client and the CLI.

Structured fields are attached through ``extra=extra_context(...)`` so that
handlers which understand them can render them, while the default formatter
keeps printing only the message.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from ..constants import Constants

LOG_LEVEL_ENV = "SNAPGATE_LOG_LEVEL"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once using Constants.LOG_FORMAT.

    Args:
        level: Level name; falls back to SNAPGATE_LOG_LEVEL, then INFO.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=Constants.LOG_FORMAT)
    root.setLevel(level_value)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log record, dropping None values."""
    return {key: value for key, value in fields.items() if value is not None}


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.monotonic()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.monotonic()

    def duration_ms(self) -> int:
        """Elapsed milliseconds, measured up to now while still inside the block."""
        end = self._end if self._end is not None else time.monotonic()
        return int((end - self._start) * 1000)
