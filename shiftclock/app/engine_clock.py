from __future__ import annotations

from typing import Any

from .engine_errors import InvalidTeam
from .engine_types import DayInput
from .engine_utils import to_calendar_day, whole_days_between
from .models import CycleAnchor, ShiftAssignment, ShiftKind

# Each successive team starts its cycle this many days after the previous one.
TEAM_STAGGER_DAYS = 2

# Upper bounds (exclusive) of the cycle positions covered by each kind.
CYCLE_BLOCKS: tuple[tuple[int, ShiftKind], ...] = (
    (2, ShiftKind.MORNING),
    (4, ShiftKind.EVENING),
    (6, ShiftKind.NIGHT),
)


def validate_team(anchor: CycleAnchor, team: Any) -> int:
    if isinstance(team, bool) or not isinstance(team, int):
        raise InvalidTeam(team, anchor.team_count)
    if team < 1 or team > anchor.team_count:
        raise InvalidTeam(team, anchor.team_count)
    return team


def is_valid_team(anchor: CycleAnchor, team: Any) -> bool:
    try:
        validate_team(anchor, team)
    except InvalidTeam:
        return False
    return True


def cycle_position(anchor: CycleAnchor, day: DayInput, team: int) -> int:
    validate_team(anchor, team)
    target = to_calendar_day(day)
    days_since_anchor = whole_days_between(target, anchor.anchor_date)
    team_offset = (team - anchor.anchor_team) * TEAM_STAGGER_DAYS
    adjusted = days_since_anchor - team_offset
    n = anchor.cycle_length_days
    return ((adjusted % n) + n) % n


def kind_at_position(position: int) -> ShiftKind:
    for upper, kind in CYCLE_BLOCKS:
        if position < upper:
            return kind
    return ShiftKind.OFF


def assign_shift(anchor: CycleAnchor, day: DayInput, team: int) -> ShiftAssignment:
    target = to_calendar_day(day)
    position = cycle_position(anchor, target, team)
    return ShiftAssignment(kind=kind_at_position(position), calendar_day=target, team=team)
