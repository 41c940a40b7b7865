from __future__ import annotations

from typing import Any


class ShiftEngineError(ValueError):
    """Base class for inputs the shift engine refuses to evaluate."""


class InvalidTeam(ShiftEngineError):
    """Raised when a team index falls outside ``[1, team_count]``."""

    def __init__(self, team: Any, team_count: int):
        self.team = team
        self.team_count = team_count
        super().__init__(f"Invalid team number: {team!r}. Expected 1-{team_count}.")


class InvalidDay(ShiftEngineError):
    """Raised when a calendar day or instant cannot be represented."""

    def __init__(self, value: Any, reason: str | None = None):
        self.value = value
        self.reason = reason
        message = f"Invalid day: {value!r}."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


class InvalidRange(ShiftEngineError):
    """Raised when a day range is inverted, empty or longer than allowed."""


class InvalidTimezone(ShiftEngineError):
    def __init__(self, name: Any):
        self.name = name
        super().__init__(f"Unknown time zone: {name!r}.")
