from __future__ import annotations

import json
import logging
import os
import time
from datetime import date, datetime, timezone
from typing import Any


SERVICE_NAME = "shiftclock"
ROOT_LOGGER_NAME = "shiftclock"
LOG_LEVEL_ENV = "SHIFTCLOCK_LOG_LEVEL"


def _timestamp_utc_microseconds() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _serialize_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=True)
    return json.dumps(value, ensure_ascii=True, default=str)


def format_log_line(level: str, event: str, **fields: Any) -> str:
    parts = [
        _timestamp_utc_microseconds(),
        f"service={SERVICE_NAME}",
        f"level={level.upper()}",
        f"event={event}",
    ]
    parts.extend(f"{key}={_serialize_value(value)}" for key, value in fields.items())
    return " | ".join(parts)


def _configured_level() -> int:
    name = os.getenv(LOG_LEVEL_ENV, "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if getattr(root, "_shiftclock_configured", False):
        return root

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_configured_level())
    root.propagate = False
    root._shiftclock_configured = True  # type: ignore[attr-defined]
    return root


def get_logger(component: str | None = None) -> logging.Logger:
    """Logger for ``component`` under the single configured ``shiftclock`` handler."""
    root = _configure_root()
    if component is None:
        return root
    return root.getChild(component)


def elapsed_us(started_at: float) -> int:
    return int((time.perf_counter() - started_at) * 1_000_000)


def log_event(logger: logging.Logger, level: str, event: str, **fields: Any) -> None:
    line = format_log_line(level=level, event=event, **fields)
    normalized = level.upper()
    if normalized in {"WARN", "WARNING"}:
        logger.warning(line)
    elif normalized == "ERROR":
        logger.error(line)
    elif normalized == "DEBUG":
        logger.debug(line)
    else:
        logger.info(line)
