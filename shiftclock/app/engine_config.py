from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import date
from typing import Annotated, Any

from pydantic import Field, TypeAdapter, ValidationError

from .engine_transfers import DEFAULT_MAX_TRANSFERS
from .logging_utils import get_logger, log_event
from .models import DEFAULT_TEAM_COUNT, CycleAnchor

ANCHOR_DATE_ENV = "SHIFTCLOCK_ANCHOR_DATE"
ANCHOR_TEAM_ENV = "SHIFTCLOCK_ANCHOR_TEAM"
TEAM_COUNT_ENV = "SHIFTCLOCK_TEAM_COUNT"
MAX_TRANSFERS_ENV = "SHIFTCLOCK_MAX_TRANSFERS"

DEFAULT_ANCHOR_DATE = date(2025, 1, 6)
DEFAULT_ANCHOR_TEAM = 1

_DATE = TypeAdapter(date)
_POSITIVE_INT = TypeAdapter(Annotated[int, Field(ge=1)])

logger = get_logger("config")


def _read(environ: Mapping[str, str], key: str, adapter: TypeAdapter, default: Any) -> Any:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return adapter.validate_python(raw.strip())
    except ValidationError as exc:
        log_event(
            logger,
            "WARN",
            "config.fallback",
            key=key,
            value=raw,
            default=default,
            reason=exc.errors()[0]["msg"],
        )
        return default


def load_anchor(environ: Mapping[str, str] | None = None) -> CycleAnchor:
    """Build the process-wide anchor from the environment.

    Each setting falls back to its default when missing or invalid. An anchor
    team beyond the configured team count falls back to team 1.
    """
    env = os.environ if environ is None else environ
    anchor_date = _read(env, ANCHOR_DATE_ENV, _DATE, DEFAULT_ANCHOR_DATE)
    team_count = _read(env, TEAM_COUNT_ENV, _POSITIVE_INT, DEFAULT_TEAM_COUNT)
    anchor_team = _read(env, ANCHOR_TEAM_ENV, _POSITIVE_INT, DEFAULT_ANCHOR_TEAM)

    if anchor_team > team_count:
        log_event(
            logger,
            "WARN",
            "config.fallback",
            key=ANCHOR_TEAM_ENV,
            value=anchor_team,
            default=DEFAULT_ANCHOR_TEAM,
            reason=f"anchor team exceeds team count {team_count}",
        )
        anchor_team = DEFAULT_ANCHOR_TEAM

    return CycleAnchor(anchor_date=anchor_date, anchor_team=anchor_team, team_count=team_count)


def load_max_transfers(environ: Mapping[str, str] | None = None) -> int:
    env = os.environ if environ is None else environ
    return _read(env, MAX_TRANSFERS_ENV, _POSITIVE_INT, DEFAULT_MAX_TRANSFERS)
