from __future__ import annotations

from datetime import date

from .engine_clock import assign_shift, validate_team
from .engine_types import DayInput
from .engine_utils import add_days, iter_days, to_calendar_day
from .models import CycleAnchor, ShiftKind, TransferEvent, TransferResult

DEFAULT_MAX_TRANSFERS = 20
DEFAULT_LOOKAHEAD_DAYS = 14

# Shift boundaries where one team's shift ends exactly as the other's begins.
SAME_DAY_BOUNDARIES: tuple[tuple[ShiftKind, ShiftKind], ...] = (
    (ShiftKind.MORNING, ShiftKind.EVENING),
    (ShiftKind.EVENING, ShiftKind.NIGHT),
)
OVERNIGHT_BOUNDARY: tuple[ShiftKind, ShiftKind] = (ShiftKind.NIGHT, ShiftKind.MORNING)


def _match(
    from_kind: ShiftKind,
    to_kind: ShiftKind,
    boundary: tuple[ShiftKind, ShiftKind],
    day: date,
    from_team: int,
    to_team: int,
    is_handover: bool,
) -> TransferEvent | None:
    if (from_kind, to_kind) != boundary:
        return None
    return TransferEvent(
        day=day,
        from_team=from_team,
        to_team=to_team,
        from_kind=from_kind,
        to_kind=to_kind,
        is_handover=is_handover,
    )


def _transfers_on(
    anchor: CycleAnchor,
    subject_team: int,
    other_team: int,
    day: date,
    end_day: date,
) -> list[TransferEvent]:
    subject_kind = assign_shift(anchor, day, subject_team).kind
    other_kind = assign_shift(anchor, day, other_team).kind
    next_day = add_days(day, 1) if day < end_day else None

    candidates: list[TransferEvent | None] = []
    for boundary in SAME_DAY_BOUNDARIES:
        candidates.append(_match(subject_kind, other_kind, boundary, day, subject_team, other_team, True))
    if next_day is not None:
        other_next = assign_shift(anchor, next_day, other_team).kind
        candidates.append(
            _match(subject_kind, other_next, OVERNIGHT_BOUNDARY, next_day, subject_team, other_team, True)
        )

    for boundary in SAME_DAY_BOUNDARIES:
        candidates.append(_match(other_kind, subject_kind, boundary, day, other_team, subject_team, False))
    if next_day is not None:
        subject_next = assign_shift(anchor, next_day, subject_team).kind
        candidates.append(
            _match(other_kind, subject_next, OVERNIGHT_BOUNDARY, next_day, other_team, subject_team, False)
        )

    return [event for event in candidates if event is not None]


def detect_transfers(
    anchor: CycleAnchor,
    subject_team: int,
    other_team: int,
    start_day: DayInput,
    end_day: DayInput,
    max_results: int = DEFAULT_MAX_TRANSFERS,
) -> TransferResult:
    """Handovers and takeovers between two teams over ``start_day..end_day``.

    A handover is the subject team ending a shift the other team begins, a
    takeover the reverse. Night-to-morning transfers are dated on the morning
    they happen and are only reported when that morning is inside the range.
    The event list is capped at ``max_results``; ``total_count`` keeps the
    uncapped number.
    """
    validate_team(anchor, subject_team)
    validate_team(anchor, other_team)
    start = to_calendar_day(start_day)
    end = to_calendar_day(end_day)
    limit = max(0, max_results)

    if subject_team == other_team or start > end:
        return TransferResult()

    events: list[TransferEvent] = []
    for day in iter_days(start, end):
        events.extend(_transfers_on(anchor, subject_team, other_team, day, end))

    return TransferResult(
        events=events[:limit],
        has_more=len(events) > limit,
        total_count=len(events),
    )


def upcoming_transfers(
    anchor: CycleAnchor,
    subject_team: int,
    other_team: int,
    today: DayInput,
    days: int = DEFAULT_LOOKAHEAD_DAYS,
    max_results: int = DEFAULT_MAX_TRANSFERS,
) -> TransferResult:
    start = to_calendar_day(today)
    return detect_transfers(anchor, subject_team, other_team, start, add_days(start, days), max_results)
