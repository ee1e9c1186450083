"""Centralized logging helpers.

Provides root logger configuration driven by the environment, a guard for
expensive DEBUG payloads and a small helper to build structured ``extra``
dicts for log records.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from constants import Constants

_CONFIGURED = False


def configure_logging(level: Optional[str] = None, force: bool = False) -> None:
    """Initialise the root logger once.

    The level is taken from ``level`` when given, otherwise from the
    ``IMAGEPOLICY_LOG_LEVEL`` environment variable, falling back to INFO.

    Args:
        level: Optional level name (e.g. "DEBUG").
        force: Reconfigure even when logging was already set up.
    """
    global _CONFIGURED  # pylint: disable=global-statement
    if _CONFIGURED and not force:
        return

    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or Constants.DEFAULT_LOG_LEVEL).upper()
    level_value = getattr(logging, level_name, None)
    if not isinstance(level_value, int):
        level_value = logging.INFO

    logging.basicConfig(level=level_value, format=Constants.LOG_FORMAT, force=force)
    _CONFIGURED = True


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log record.

    Keys with a None value are dropped so records stay compact.
    """
    return {key: value for key, value in fields.items() if value is not None}


class Timer:
    """Context manager measuring elapsed wall time in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds; measured up to now while still inside the block."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
