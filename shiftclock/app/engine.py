from __future__ import annotations

from datetime import date, datetime

from . import engine_queries as queries
from .engine_clock import assign_shift, cycle_position
from .engine_config import load_anchor, load_max_transfers
from .engine_countdown import tick
from .engine_export import DEFAULT_EXPORT_TIMEZONE, export_calendar
from .engine_shift_day import shift_code, shift_day_for
from .engine_transfers import DEFAULT_LOOKAHEAD_DAYS, DEFAULT_MAX_TRANSFERS, detect_transfers, upcoming_transfers
from .engine_types import DayInput, InstantInput
from .models import (
    CalendarExport,
    CountdownState,
    CycleAnchor,
    OffDayProgress,
    ShiftAssignment,
    ShiftTimeline,
    TransferResult,
)


class ShiftEngine:
    """The scheduling functions bound to one immutable anchor.

    Holds no other state, so one instance can be shared between threads.
    """

    __slots__ = ("_anchor", "_max_transfers")

    def __init__(self, anchor: CycleAnchor, max_transfers: int = DEFAULT_MAX_TRANSFERS):
        self._anchor = anchor
        self._max_transfers = max_transfers

    @property
    def anchor(self) -> CycleAnchor:
        return self._anchor

    @property
    def max_transfers(self) -> int:
        return self._max_transfers

    @classmethod
    def from_env(cls, environ=None) -> "ShiftEngine":
        return cls(load_anchor(environ), load_max_transfers(environ))

    def assign_shift(self, day: DayInput, team: int) -> ShiftAssignment:
        return assign_shift(self.anchor, day, team)

    def cycle_position(self, day: DayInput, team: int) -> int:
        return cycle_position(self.anchor, day, team)

    def shift_day_for(self, instant: InstantInput) -> date:
        return shift_day_for(instant)

    def shift_code(self, day: DayInput, team: int) -> str:
        return shift_code(self.anchor, day, team)

    def current_assignment(self, day: DayInput, team: int) -> ShiftAssignment:
        return queries.current_assignment(self.anchor, day, team)

    def current_assignment_at(self, instant: InstantInput, team: int) -> ShiftAssignment:
        return queries.current_assignment_at(self.anchor, instant, team)

    def next_working_assignment(self, from_day: DayInput, team: int) -> ShiftAssignment | None:
        return queries.next_working_assignment(self.anchor, from_day, team)

    def off_day_progress(self, day: DayInput, team: int) -> OffDayProgress | None:
        return queries.off_day_progress(self.anchor, day, team)

    def all_teams_snapshot(self, day: DayInput) -> list[ShiftAssignment]:
        return queries.all_teams_snapshot(self.anchor, day)

    def schedule_range(self, start: DayInput, days: int = queries.DEFAULT_SCHEDULE_DAYS) -> list[list[ShiftAssignment]]:
        return queries.schedule_range(self.anchor, start, days)

    def is_on_duty(self, assignment: ShiftAssignment, now: InstantInput) -> bool:
        return queries.is_on_duty(assignment, now)

    def on_duty_team(self, now: InstantInput) -> ShiftAssignment | None:
        return queries.on_duty_team(self.anchor, now)

    def shift_timeline(self, day: DayInput, team: int) -> ShiftTimeline | None:
        return queries.shift_timeline(self.anchor, day, team)

    def next_shift_start(self, now: InstantInput, team: int) -> datetime | None:
        return queries.next_shift_start(self.anchor, now, team)

    def detect_transfers(
        self,
        subject_team: int,
        other_team: int,
        start_day: DayInput,
        end_day: DayInput,
        max_results: int | None = None,
    ) -> TransferResult:
        limit = self.max_transfers if max_results is None else max_results
        return detect_transfers(self.anchor, subject_team, other_team, start_day, end_day, limit)

    def upcoming_transfers(
        self,
        subject_team: int,
        other_team: int,
        today: DayInput,
        days: int = DEFAULT_LOOKAHEAD_DAYS,
    ) -> TransferResult:
        return upcoming_transfers(self.anchor, subject_team, other_team, today, days, self.max_transfers)

    def countdown_to_next_shift(self, now: InstantInput, team: int) -> CountdownState:
        return tick(self.next_shift_start(now, team), now)

    def tick(self, target: InstantInput | None, now: InstantInput) -> CountdownState:
        return tick(target, now)

    def export_calendar(
        self,
        team: int,
        start_day: DayInput,
        end_day: DayInput,
        include_off_days: bool = True,
        include_shift_times: bool = True,
        tz_name: str = DEFAULT_EXPORT_TIMEZONE,
        generated_at: datetime | None = None,
    ) -> CalendarExport:
        return export_calendar(
            self.anchor,
            team,
            start_day,
            end_day,
            include_off_days=include_off_days,
            include_shift_times=include_shift_times,
            tz_name=tz_name,
            generated_at=generated_at,
        )
