from __future__ import annotations

from datetime import date, datetime, tzinfo

from .engine_clock import assign_shift, is_valid_team
from .engine_errors import InvalidRange
from .engine_shift_day import shift_day_for
from .engine_types import DayInput, InstantInput
from .engine_utils import add_days, at_hour, to_calendar_day, to_instant
from .logging_utils import get_logger, log_event
from .models import OFF_BLOCK_DAYS, CycleAnchor, OffDayProgress, ShiftAssignment, ShiftTimeline

DEFAULT_SCHEDULE_DAYS = 7

logger = get_logger("queries")


def current_assignment(anchor: CycleAnchor, day: DayInput, team: int) -> ShiftAssignment:
    return assign_shift(anchor, day, team)


def current_assignment_at(anchor: CycleAnchor, instant: InstantInput, team: int) -> ShiftAssignment:
    return assign_shift(anchor, shift_day_for(instant), team)


def next_working_assignment(anchor: CycleAnchor, from_day: DayInput, team: int) -> ShiftAssignment | None:
    """First working assignment strictly after ``from_day``, searching one cycle ahead.

    Returns ``None`` for an unknown team. One cycle is enough as long as every
    team works at least one day per cycle; a miss is logged as an error.
    """
    start = to_calendar_day(from_day)
    if not is_valid_team(anchor, team):
        return None

    for offset in range(1, anchor.cycle_length_days + 1):
        assignment = assign_shift(anchor, add_days(start, offset), team)
        if assignment.is_working:
            return assignment

    log_event(
        logger,
        "ERROR",
        "query.next_working.exhausted",
        team=team,
        from_day=start,
        searched_days=anchor.cycle_length_days,
    )
    return None


def off_day_progress(anchor: CycleAnchor, day: DayInput, team: int) -> OffDayProgress | None:
    """Position of ``day`` inside the team's off block, or ``None`` while working."""
    target = to_calendar_day(day)
    if not is_valid_team(anchor, team):
        return None
    if assign_shift(anchor, target, team).is_working:
        return None

    off_days = 0
    check_day = target
    for _ in range(anchor.cycle_length_days):
        if assign_shift(anchor, check_day, team).is_working:
            break
        off_days += 1
        check_day = add_days(check_day, -1)
    else:
        log_event(
            logger,
            "ERROR",
            "query.off_day_progress.exhausted",
            team=team,
            day=target,
            searched_days=anchor.cycle_length_days,
        )
        return None

    return OffDayProgress(current=off_days, total=OFF_BLOCK_DAYS)


def all_teams_snapshot(anchor: CycleAnchor, day: DayInput) -> list[ShiftAssignment]:
    target = to_calendar_day(day)
    return [assign_shift(anchor, target, team) for team in anchor.teams]


def schedule_range(anchor: CycleAnchor, start: DayInput, days: int = DEFAULT_SCHEDULE_DAYS) -> list[list[ShiftAssignment]]:
    """One snapshot per day for ``days`` consecutive days from ``start``."""
    first = to_calendar_day(start)
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise InvalidRange(f"A schedule covers at least one day, got {days!r}.")
    return [all_teams_snapshot(anchor, add_days(first, offset)) for offset in range(days)]


def shift_window(assignment: ShiftAssignment, tz: tzinfo | None = None) -> tuple[datetime, datetime] | None:
    kind = assignment.kind
    if kind.start_hour is None or kind.end_hour is None:
        return None
    start = at_hour(assignment.calendar_day, kind.start_hour, tz)
    end_day = assignment.calendar_day
    if kind.crosses_midnight:
        end_day = add_days(end_day, 1)
    return start, at_hour(end_day, kind.end_hour, tz)


def is_on_duty(assignment: ShiftAssignment, now: InstantInput) -> bool:
    moment = to_instant(now)
    window = shift_window(assignment, moment.tzinfo)
    if window is None:
        return False
    start, end = window
    return start <= moment < end


def on_duty_team(anchor: CycleAnchor, now: InstantInput) -> ShiftAssignment | None:
    moment = to_instant(now)
    for assignment in all_teams_snapshot(anchor, shift_day_for(moment)):
        if is_on_duty(assignment, moment):
            return assignment
    return None


def _working_by_start(anchor: CycleAnchor, day: date) -> list[ShiftAssignment]:
    working = [a for a in all_teams_snapshot(anchor, day) if a.is_working]
    return sorted(working, key=lambda a: a.kind.start_hour or 0)


def shift_timeline(anchor: CycleAnchor, day: DayInput, team: int) -> ShiftTimeline | None:
    """Neighbours of ``team`` in the day's sequence of working shifts.

    Teams sharing ``team``'s shift are never its neighbours; with more teams
    than shifts the first team on the neighbouring shift is reported. When
    ``team`` works the last shift of the day, the following entry is the first
    shift of the next day.
    """
    target = to_calendar_day(day)
    current = assign_shift(anchor, target, team)
    if not current.is_working:
        return None

    timeline = _working_by_start(anchor, target)
    start_hour = current.kind.start_hour
    earlier = [a for a in timeline if a.kind.start_hour < start_hour]
    later = [a for a in timeline if a.kind.start_hour > start_hour]
    previous = None
    if earlier:
        previous_kind = earlier[-1].kind
        previous = next(a for a in earlier if a.kind is previous_kind)

    if later:
        following = later[0]
    else:
        tomorrow = _working_by_start(anchor, add_days(target, 1))
        following = tomorrow[0] if tomorrow else None

    return ShiftTimeline(previous=previous, current=current, following=following)


def next_shift_start(anchor: CycleAnchor, now: InstantInput, team: int) -> datetime | None:
    """Start instant of the team's next shift, the target a countdown runs to."""
    moment = to_instant(now)
    shift_day = shift_day_for(moment)
    if not is_valid_team(anchor, team):
        return None

    current = assign_shift(anchor, shift_day, team)
    window = shift_window(current, moment.tzinfo)
    if window is not None and window[0] > moment:
        return window[0]

    upcoming = next_working_assignment(anchor, shift_day, team)
    if upcoming is None:
        return None
    window = shift_window(upcoming, moment.tzinfo)
    return window[0] if window is not None else None
