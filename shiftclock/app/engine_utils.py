from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any

from .engine_errors import InvalidDay


def _iso_text(value: str) -> str:
    # datetime.fromisoformat only accepts a "Z" suffix from Python 3.11 on.
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        return text[:-1] + "+00:00"
    return text


def to_calendar_day(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = _iso_text(value)
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError as exc:
            raise InvalidDay(value, str(exc)) from exc
    raise InvalidDay(value, "Expected a date, a datetime or an ISO 8601 string.")


def to_instant(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(_iso_text(value))
        except ValueError as exc:
            raise InvalidDay(value, str(exc)) from exc
    raise InvalidDay(value, "Expected a datetime, a date or an ISO 8601 string.")


def add_days(day: date, days: int) -> date:
    try:
        return day + timedelta(days=days)
    except OverflowError as exc:
        raise InvalidDay(day, f"Shifting by {days} days leaves the supported calendar range.") from exc


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from ``start`` to ``end``, both included."""
    day = start
    while day <= end:
        yield day
        if day == date.max:
            return
        day = day + timedelta(days=1)


def whole_days_between(day: date, reference: date) -> int:
    return (day - reference).days


def at_hour(day: date, hour: int, tz: tzinfo | None = None) -> datetime:
    return datetime.combine(day, time(hour=hour), tzinfo=tz)


def format_date_code(day: date) -> str:
    """Format ``day`` as ``YYWW.D`` using ISO week-year, week and weekday.

    The two-digit year is only unambiguous within one century.
    """
    iso = day.isocalendar()
    return f"{iso[0] % 100:02d}{iso[1]:02d}.{iso[2]}"
