from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


CYCLE_LENGTH_DAYS = 10
DEFAULT_TEAM_COUNT = 5
OFF_BLOCK_DAYS = 4
SHIFT_CHANGE_HOUR = 7


class ShiftDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: Literal["M", "E", "N", "O"]
    display_name: str
    hours_label: str
    start_hour: int | None = Field(None, ge=0, le=23)
    end_hour: int | None = Field(None, ge=0, le=23)
    is_working: bool


class ShiftKind(str, Enum):
    MORNING = "M"
    EVENING = "E"
    NIGHT = "N"
    OFF = "O"

    @property
    def definition(self) -> ShiftDefinition:
        return SHIFT_DEFINITIONS[self]

    @property
    def code(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return self.definition.display_name

    @property
    def hours_label(self) -> str:
        return self.definition.hours_label

    @property
    def start_hour(self) -> int | None:
        return self.definition.start_hour

    @property
    def end_hour(self) -> int | None:
        return self.definition.end_hour

    @property
    def is_working(self) -> bool:
        return self.definition.is_working

    @property
    def crosses_midnight(self) -> bool:
        start, end = self.start_hour, self.end_hour
        return start is not None and end is not None and end < start


SHIFT_DEFINITIONS: dict[ShiftKind, ShiftDefinition] = {
    ShiftKind.MORNING: ShiftDefinition(
        code="M", display_name="Morning", hours_label="07:00-15:00", start_hour=7, end_hour=15, is_working=True
    ),
    ShiftKind.EVENING: ShiftDefinition(
        code="E", display_name="Evening", hours_label="15:00-23:00", start_hour=15, end_hour=23, is_working=True
    ),
    ShiftKind.NIGHT: ShiftDefinition(
        code="N", display_name="Night", hours_label="23:00-07:00", start_hour=23, end_hour=7, is_working=True
    ),
    ShiftKind.OFF: ShiftDefinition(code="O", display_name="Off", hours_label="Not working", is_working=False),
}


class CycleAnchor(BaseModel):
    """Pins the cycle arithmetic to the calendar: on ``anchor_date`` the
    ``anchor_team`` is on the first day of its Morning block."""

    model_config = ConfigDict(frozen=True)

    anchor_date: date
    anchor_team: int = Field(1, ge=1)
    cycle_length_days: Literal[10] = CYCLE_LENGTH_DAYS
    team_count: int = Field(DEFAULT_TEAM_COUNT, ge=1)

    @model_validator(mode="after")
    def _anchor_team_within_team_count(self) -> "CycleAnchor":
        if self.anchor_team > self.team_count:
            raise ValueError(f"anchor_team must be between 1 and team_count ({self.team_count}).")
        return self

    @property
    def teams(self) -> range:
        return range(1, self.team_count + 1)


class ShiftAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ShiftKind
    calendar_day: date
    team: int = Field(..., ge=1)

    @property
    def is_working(self) -> bool:
        return self.kind.is_working


class OffDayProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: int = Field(..., ge=1)
    total: int = OFF_BLOCK_DAYS


class ShiftTimeline(BaseModel):
    model_config = ConfigDict(frozen=True)

    previous: ShiftAssignment | None = None
    current: ShiftAssignment
    following: ShiftAssignment | None = None


class TransferEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    from_team: int
    to_team: int
    from_kind: ShiftKind
    to_kind: ShiftKind
    is_handover: bool


class TransferResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    events: list[TransferEvent] = Field(default_factory=list)
    has_more: bool = False
    total_count: int = Field(0, ge=0)


class CountdownState(BaseModel):
    model_config = ConfigDict(frozen=True)

    remaining_seconds: int = Field(0, ge=0)
    is_expired: bool = True
    formatted: str = ""
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0


class CalendarExport(BaseModel):
    model_config = ConfigDict(frozen=True)

    team: int = Field(..., ge=1)
    start_day: date
    end_day: date
    filename: str
    content: bytes
    event_count: int = Field(0, ge=0)
