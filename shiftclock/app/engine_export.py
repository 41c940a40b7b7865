from __future__ import annotations

import time
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from icalendar import Calendar, Event

from .engine_clock import assign_shift, validate_team
from .engine_errors import InvalidRange, InvalidTimezone
from .engine_queries import shift_window
from .engine_shift_day import shift_code
from .engine_types import DayInput
from .engine_utils import add_days, iter_days, to_calendar_day, whole_days_between
from .logging_utils import elapsed_us, get_logger, log_event
from .models import CalendarExport, CycleAnchor, ShiftAssignment

MAX_EXPORT_SPAN_DAYS = 365
DEFAULT_EXPORT_TIMEZONE = "Europe/Brussels"
PRODUCT_ID = "-//Shiftclock//Shiftclock Calendar Export//EN"
CALENDAR_CATEGORY = "Shiftclock"

logger = get_logger("export")


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidTimezone(name) from exc


def validate_export_range(start_day: date, end_day: date) -> None:
    if end_day < start_day:
        raise InvalidRange("End date must be after start date.")
    if whole_days_between(end_day, start_day) > MAX_EXPORT_SPAN_DAYS:
        raise InvalidRange(f"Date range cannot exceed {MAX_EXPORT_SPAN_DAYS} days.")


def export_filename(team: int, start_day: date, end_day: date) -> str:
    if start_day == end_day:
        return f"Shiftclock_Team{team}_{start_day.isoformat()}.ics"
    return f"Shiftclock_Team{team}_{start_day.isoformat()}_to_{end_day.isoformat()}.ics"


def build_shift_event(
    anchor: CycleAnchor,
    assignment: ShiftAssignment,
    tz: ZoneInfo,
    include_shift_times: bool,
    stamp: datetime,
) -> Event:
    """One VEVENT for ``assignment``.

    Working shifts become timed events in ``tz`` when ``include_shift_times``
    is set; off days, and every day otherwise, are all-day events.
    """
    kind = assignment.kind
    day = assignment.calendar_day
    team = assignment.team

    event = Event()
    event.add("uid", f"{day.isoformat()}-team{team}@shiftclock")
    event.add("dtstamp", stamp)
    summary = f"Team {team}: {kind.display_name}"
    if kind.is_working:
        summary += " shift"
    event.add("summary", summary)

    window = shift_window(assignment, tz) if include_shift_times else None
    if window is not None:
        event.add("dtstart", window[0])
        event.add("dtend", window[1])
    else:
        event.add("dtstart", day)
        event.add("dtend", add_days(day, 1))

    event.add("description", f"Shift code: {shift_code(anchor, day, team)}\nHours: {kind.hours_label}")
    event.add("categories", [CALENDAR_CATEGORY, f"Team{team}", kind.display_name])
    event.add("transp", "OPAQUE" if kind.is_working else "TRANSPARENT")
    return event


def export_calendar(
    anchor: CycleAnchor,
    team: int,
    start_day: DayInput,
    end_day: DayInput,
    include_off_days: bool = True,
    include_shift_times: bool = True,
    tz_name: str = DEFAULT_EXPORT_TIMEZONE,
    generated_at: datetime | None = None,
) -> CalendarExport:
    """Render ``team``'s shifts from ``start_day`` to ``end_day`` (inclusive) as iCalendar.

    Timed events carry a ``TZID`` and the matching VTIMEZONE block is added to
    the calendar.
    """
    validate_team(anchor, team)
    first = to_calendar_day(start_day)
    last = to_calendar_day(end_day)
    validate_export_range(first, last)
    tz = resolve_timezone(tz_name)
    stamp = generated_at or datetime.now(timezone.utc)

    started_at = time.perf_counter()
    calendar = Calendar()
    calendar.add("prodid", PRODUCT_ID)
    calendar.add("version", "2.0")
    calendar.add("calscale", "GREGORIAN")
    calendar.add("x-wr-calname", f"Team {team} shifts")

    event_count = 0
    for day in iter_days(first, last):
        assignment = assign_shift(anchor, day, team)
        if not assignment.is_working and not include_off_days:
            continue
        calendar.add_component(build_shift_event(anchor, assignment, tz, include_shift_times, stamp))
        event_count += 1

    calendar.add_missing_timezones()
    content = calendar.to_ical()

    log_event(
        logger,
        "INFO",
        "export.built",
        team=team,
        start=first,
        end=last,
        events=event_count,
        timezone=tz_name,
        bytes=len(content),
        elapsed_us=elapsed_us(started_at),
    )
    return CalendarExport(
        team=team,
        start_day=first,
        end_day=last,
        filename=export_filename(team, first, last),
        content=content,
        event_count=event_count,
    )
