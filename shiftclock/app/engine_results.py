from __future__ import annotations

from datetime import date, datetime

from .engine_shift_day import shift_code
from .engine_utils import format_date_code
from .models import (
    CountdownState,
    CycleAnchor,
    OffDayProgress,
    ShiftAssignment,
    ShiftKind,
    ShiftTimeline,
    TransferResult,
)


def kind_to_meta(kind: ShiftKind) -> dict:
    return {
        "code": kind.code,
        "name": kind.display_name,
        "hours": kind.hours_label,
        "start": kind.start_hour,
        "end": kind.end_hour,
        "is_working": kind.is_working,
    }


def assignment_to_meta(anchor: CycleAnchor, assignment: ShiftAssignment) -> dict:
    return {
        "team": assignment.team,
        "date": assignment.calendar_day.isoformat(),
        "code": shift_code(anchor, assignment.calendar_day, assignment.team),
        "shift": kind_to_meta(assignment.kind),
    }


def _optional_assignment(anchor: CycleAnchor, assignment: ShiftAssignment | None) -> dict | None:
    if assignment is None:
        return None
    return assignment_to_meta(anchor, assignment)


def build_anchor_response(anchor: CycleAnchor, max_transfers: int) -> dict:
    return {
        "anchor_date": anchor.anchor_date.isoformat(),
        "anchor_team": anchor.anchor_team,
        "cycle_length_days": anchor.cycle_length_days,
        "team_count": anchor.team_count,
        "max_transfers": max_transfers,
    }


def build_snapshot_response(
    anchor: CycleAnchor,
    day: date,
    snapshot: list[ShiftAssignment],
    on_duty: ShiftAssignment | None,
) -> dict:
    return {
        "date": day.isoformat(),
        "teams": [assignment_to_meta(anchor, assignment) for assignment in snapshot],
        "on_duty_team": on_duty.team if on_duty is not None else None,
    }


def build_team_status_response(
    anchor: CycleAnchor,
    at: datetime,
    current: ShiftAssignment,
    on_duty: bool,
    progress: OffDayProgress | None,
    upcoming: ShiftAssignment | None,
    countdown: CountdownState,
    timeline: ShiftTimeline | None,
) -> dict:
    return {
        "at": at.isoformat(),
        "shift_day": current.calendar_day.isoformat(),
        "current": assignment_to_meta(anchor, current),
        "on_duty": on_duty,
        "off_day_progress": progress.model_dump() if progress is not None else None,
        "next_shift": _optional_assignment(anchor, upcoming),
        "countdown": countdown.model_dump(),
        "timeline": (
            {
                "previous": _optional_assignment(anchor, timeline.previous),
                "current": assignment_to_meta(anchor, timeline.current),
                "following": _optional_assignment(anchor, timeline.following),
            }
            if timeline is not None
            else None
        ),
    }


def build_transfers_response(result: TransferResult) -> dict:
    return {
        "transfers": [
            {
                "date": event.day.isoformat(),
                "from_team": event.from_team,
                "to_team": event.to_team,
                "from_shift": event.from_kind.code,
                "from_shift_name": event.from_kind.display_name,
                "to_shift": event.to_kind.code,
                "to_shift_name": event.to_kind.display_name,
                "is_handover": event.is_handover,
            }
            for event in result.events
        ],
        "has_more": result.has_more,
        "total_count": result.total_count,
    }


def build_schedule_response(
    anchor: CycleAnchor,
    start: date,
    grid: list[list[ShiftAssignment]],
    previous_start: date | None,
    next_start: date | None,
) -> dict:
    return {
        "start": start.isoformat(),
        "days": len(grid),
        "previous_start": previous_start.isoformat() if previous_start is not None else None,
        "next_start": next_start.isoformat() if next_start is not None else None,
        "columns": [
            {
                "date": snapshot[0].calendar_day.isoformat(),
                "date_code": format_date_code(snapshot[0].calendar_day),
                "weekday": snapshot[0].calendar_day.strftime("%a"),
                "shifts": {str(a.team): a.kind.code for a in snapshot},
            }
            for snapshot in grid
        ],
        "teams": [
            {
                "team": team,
                "shifts": [assignment_to_meta(anchor, snapshot[index]) for snapshot in grid],
            }
            for index, team in enumerate(anchor.teams)
        ],
    }
