"""Tests for the logging helpers."""

import logging
from unittest.mock import patch

from common import logging_utils
from common.logging_utils import Timer, configure_logging, extra_context, is_debug_enabled
from constants import Constants


def test_extra_context_drops_none():
    """None values are left out of the record extras."""
    assert extra_context(event="decision", target=None, count=0) == {"event": "decision", "count": 0}


def test_is_debug_enabled():
    """The guard follows the effective level of the logger."""
    logger = logging.getLogger("imagepolicy.test.debug")
    logger.setLevel(logging.DEBUG)
    assert is_debug_enabled(logger)
    logger.setLevel(logging.INFO)
    assert not is_debug_enabled(logger)


def test_timer_measures_block():
    """The timer reports a non-negative duration after the block."""
    with Timer() as t:
        pass
    assert t.duration_ms() >= 0


def test_configure_logging_uses_env_level(monkeypatch):
    """The level comes from the environment and setup happens once."""
    monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "debug")
    monkeypatch.setattr(logging_utils, "_CONFIGURED", False)
    with patch("common.logging_utils.logging.basicConfig") as basic:
        configure_logging()
        configure_logging()
    basic.assert_called_once_with(level=logging.DEBUG, format=Constants.LOG_FORMAT, force=False)


def test_configure_logging_unknown_level(monkeypatch):
    """Unknown level names fall back to INFO."""
    monkeypatch.setattr(logging_utils, "_CONFIGURED", False)
    with patch("common.logging_utils.logging.basicConfig") as basic:
        configure_logging("verbose", force=True)
    assert basic.call_args.kwargs["level"] == logging.INFO
