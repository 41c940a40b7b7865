import logging
import time
from datetime import date
from unittest.mock import MagicMock

from shiftclock.app.logging_utils import elapsed_us, format_log_line, get_logger, log_event


def test_format_log_line_fields():
    line = format_log_line("warn", "config.fallback", key="SHIFTCLOCK_ANCHOR_TEAM", value=None, ok=False, day=date(2025, 7, 16))
    parts = line.split(" | ")
    assert parts[1] == "service=shiftclock"
    assert parts[2] == "level=WARN"
    assert parts[3] == "event=config.fallback"
    assert 'key="SHIFTCLOCK_ANCHOR_TEAM"' in parts
    assert "value=null" in parts
    assert "ok=false" in parts
    assert "day=2025-07-16" in parts


def test_log_event_routes_levels():
    logger = MagicMock()
    log_event(logger, "INFO", "a")
    log_event(logger, "WARN", "b")
    log_event(logger, "ERROR", "c")
    assert logger.info.call_count == 1
    assert logger.warning.call_count == 1
    assert logger.error.call_count == 1


def test_get_logger_configures_once():
    first = get_logger()
    second = get_logger()
    assert first is second
    # The test runner may attach its own capture handlers, so count only ours.
    own = [
        h
        for h in first.handlers
        if type(h) is logging.StreamHandler and h.formatter is not None and h.formatter._fmt == "%(message)s"
    ]
    assert len(own) == 1
    assert first._shiftclock_configured is True
    assert first.propagate is False


def test_component_loggers_share_root_handler():
    child = get_logger("queries")
    assert child.name == "shiftclock.queries"
    assert child.parent is get_logger()
    assert child.handlers == []


def test_elapsed_us_is_non_negative():
    assert elapsed_us(time.perf_counter()) >= 0
