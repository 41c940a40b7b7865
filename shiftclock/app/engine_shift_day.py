from __future__ import annotations

from datetime import date

from .engine_clock import assign_shift
from .engine_types import DayInput, InstantInput
from .engine_utils import add_days, format_date_code, to_calendar_day, to_instant
from .models import SHIFT_CHANGE_HOUR, CycleAnchor, ShiftKind


def shift_day_for(instant: InstantInput) -> date:
    """Return the logical shift day of a wall-clock instant.

    Night runs 23:00-07:00 and belongs to the day it starts, so anything
    before 07:00 is attributed to the previous calendar day. A bare date is
    read as midnight of that day.
    """
    moment = to_instant(instant)
    if moment.hour < SHIFT_CHANGE_HOUR:
        return add_days(moment.date(), -1)
    return moment.date()


def shift_code(anchor: CycleAnchor, day: DayInput, team: int) -> str:
    target = to_calendar_day(day)
    assignment = assign_shift(anchor, target, team)
    code_day = target
    if assignment.kind is ShiftKind.NIGHT:
        code_day = add_days(target, -1)
    return f"{format_date_code(code_day)}{assignment.kind.code}"
