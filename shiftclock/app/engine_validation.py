from __future__ import annotations

from datetime import date, datetime
from typing import Any, NoReturn

from fastapi import HTTPException

from .engine_clock import is_valid_team
from .engine_errors import InvalidDay
from .engine_utils import to_calendar_day, to_instant
from .logging_utils import log_event
from .models import CycleAnchor

MAX_RANGE_DAYS = 366


def reject(logger, request_id: str, reason: str, detail: str, **fields: Any) -> NoReturn:
    log_event(logger, "WARN", "request.rejected", request_id=request_id, reason=reason, **fields)
    raise HTTPException(status_code=422, detail=detail)


def parse_day_param(value: str, field: str, logger, request_id: str) -> date:
    try:
        return to_calendar_day(value)
    except InvalidDay:
        reject(logger, request_id, "invalid_day", f"'{field}' must be an ISO date, got '{value}'.", field=field)


def parse_instant_param(value: str, field: str, logger, request_id: str) -> datetime:
    try:
        return to_instant(value)
    except InvalidDay:
        reject(logger, request_id, "invalid_instant", f"'{field}' must be an ISO date-time, got '{value}'.", field=field)


def validate_team_request(anchor: CycleAnchor, team: int, logger, request_id: str, field: str = "team") -> None:
    if not is_valid_team(anchor, team):
        reject(
            logger,
            request_id,
            "invalid_team",
            f"'{field}' must be between 1 and {anchor.team_count}, got {team}.",
            field=field,
            team=team,
        )


def validate_day_range(
    start_day: date,
    end_day: date,
    logger,
    request_id: str,
    max_span_days: int = MAX_RANGE_DAYS,
) -> None:
    if start_day > end_day:
        reject(
            logger,
            request_id,
            "inverted_range",
            f"Start date {start_day.isoformat()} is after end date {end_day.isoformat()}.",
            start=start_day,
            end=end_day,
        )

    span_days = (end_day - start_day).days + 1
    if span_days > max_span_days:
        reject(
            logger,
            request_id,
            "range_too_long",
            f"Date range covers {span_days} days, at most {max_span_days} are allowed.",
            span_days=span_days,
        )


def validate_transfer_request(
    anchor: CycleAnchor,
    subject_team: int,
    other_team: int,
    start_day: date,
    end_day: date,
    logger,
    request_id: str,
) -> None:
    validate_team_request(anchor, subject_team, logger, request_id, field="team")
    validate_team_request(anchor, other_team, logger, request_id, field="other")

    if subject_team == other_team:
        reject(
            logger,
            request_id,
            "same_team",
            "Transfers need two different teams.",
            team=subject_team,
        )

    validate_day_range(start_day, end_day, logger, request_id)


def validate_export_request(
    anchor: CycleAnchor,
    team: int,
    start_day: date,
    end_day: date,
    logger,
    request_id: str,
) -> None:
    validate_team_request(anchor, team, logger, request_id)
    validate_day_range(start_day, end_day, logger, request_id)
