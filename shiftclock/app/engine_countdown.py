from __future__ import annotations

from datetime import datetime

from .engine_errors import InvalidDay
from .engine_types import InstantInput
from .engine_utils import to_instant
from .models import CountdownState

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


def split_duration(total_seconds: int) -> tuple[int, int, int, int]:
    days = total_seconds // SECONDS_PER_DAY
    hours = (total_seconds % SECONDS_PER_DAY) // SECONDS_PER_HOUR
    minutes = (total_seconds % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE
    seconds = total_seconds % SECONDS_PER_MINUTE
    return days, hours, minutes, seconds


def format_duration(total_seconds: int) -> str:
    # Show the two most significant units, coarser as the duration grows.
    days, hours, minutes, seconds = split_duration(max(0, total_seconds))
    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def tick(target: InstantInput | None, now: InstantInput) -> CountdownState:
    if target is None:
        return CountdownState()

    target_at: datetime = to_instant(target)
    now_at: datetime = to_instant(now)
    try:
        delta = target_at - now_at
    except TypeError as exc:
        raise InvalidDay(target, "Cannot compare timezone-aware and naive instants.") from exc
    remaining = int(delta.total_seconds())
    if remaining <= 0:
        return CountdownState()

    days, hours, minutes, seconds = split_duration(remaining)
    return CountdownState(
        remaining_seconds=remaining,
        is_expired=False,
        formatted=format_duration(remaining),
        days=days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
    )
