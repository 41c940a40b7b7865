import time
from datetime import date, datetime
from uuid import uuid4

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response

from .engine import ShiftEngine
from .engine_errors import InvalidDay, ShiftEngineError
from .engine_export import DEFAULT_EXPORT_TIMEZONE
from .engine_queries import DEFAULT_SCHEDULE_DAYS
from .engine_results import (
    build_anchor_response,
    build_schedule_response,
    build_snapshot_response,
    build_team_status_response,
    build_transfers_response,
)
from .engine_utils import add_days
from .engine_validation import (
    parse_day_param,
    parse_instant_param,
    validate_export_request,
    validate_team_request,
    validate_transfer_request,
)
from .logging_utils import elapsed_us, get_logger, log_event


app = FastAPI(title="Shiftclock Service")
logger = get_logger("api")
engine = ShiftEngine.from_env()

log_event(
    logger,
    "INFO",
    "config.loaded",
    anchor_date=engine.anchor.anchor_date,
    anchor_team=engine.anchor.anchor_team,
    team_count=engine.anchor.team_count,
    max_transfers=engine.max_transfers,
)


def _request_id(request: Request) -> str:
    return request.headers.get("X-Request-Id") or uuid4().hex[:8]


def _resolve_moment(at: str | None, request_id: str) -> datetime:
    if at is None:
        return datetime.now()
    return parse_instant_param(at, "at", logger, request_id)


@app.exception_handler(ShiftEngineError)
def engine_error_handler(request: Request, exc: ShiftEngineError):
    log_event(
        logger,
        "WARN",
        "request.rejected",
        request_id=_request_id(request),
        path=request.url.path,
        reason=type(exc).__name__,
        detail=str(exc),
    )
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/health")
def health():
    log_event(logger, "INFO", "health.check")
    return {"status": "ok"}


@app.get("/config")
def config():
    return build_anchor_response(engine.anchor, engine.max_transfers)


@app.get("/teams")
def teams(request: Request, date: str | None = None, at: str | None = None):
    request_id = _request_id(request)
    log_event(logger, "INFO", "request.received", request_id=request_id, path="/teams", date=date, at=at)

    if date is not None:
        day = parse_day_param(date, "date", logger, request_id)
        on_duty = None
    else:
        moment = _resolve_moment(at, request_id)
        day = engine.shift_day_for(moment)
        on_duty = engine.on_duty_team(moment)

    return build_snapshot_response(engine.anchor, day, engine.all_teams_snapshot(day), on_duty)


@app.get("/teams/{team}/shift")
def team_shift(team: int, request: Request, at: str | None = None):
    request_id = _request_id(request)
    log_event(logger, "INFO", "request.received", request_id=request_id, path="/teams/{team}/shift", team=team, at=at)
    validate_team_request(engine.anchor, team, logger, request_id)

    started_at = time.perf_counter()
    moment = _resolve_moment(at, request_id)
    current = engine.current_assignment_at(moment, team)
    shift_day = current.calendar_day
    response = build_team_status_response(
        engine.anchor,
        at=moment,
        current=current,
        on_duty=engine.is_on_duty(current, moment),
        progress=engine.off_day_progress(shift_day, team),
        upcoming=engine.next_working_assignment(shift_day, team),
        countdown=engine.countdown_to_next_shift(moment, team),
        timeline=engine.shift_timeline(shift_day, team),
    )
    log_event(
        logger,
        "INFO",
        "request.done",
        request_id=request_id,
        team=team,
        shift=current.kind.code,
        elapsed_us=elapsed_us(started_at),
    )
    return response


@app.get("/teams/{team}/transfers")
def team_transfers(
    team: int,
    request: Request,
    other: int,
    start: str | None = None,
    end: str | None = None,
    days: int = Query(14, ge=0, le=365),
    limit: int | None = Query(None, ge=1, le=500),
):
    request_id = _request_id(request)
    log_event(
        logger,
        "INFO",
        "request.received",
        request_id=request_id,
        path="/teams/{team}/transfers",
        team=team,
        other=other,
        start=start,
        end=end,
        days=days,
        limit=limit,
    )

    start_day = (
        parse_day_param(start, "start", logger, request_id)
        if start is not None
        else datetime.now().date()
    )
    end_day = parse_day_param(end, "end", logger, request_id) if end is not None else add_days(start_day, days)
    validate_transfer_request(engine.anchor, team, other, start_day, end_day, logger, request_id)

    started_at = time.perf_counter()
    result = engine.detect_transfers(team, other, start_day, end_day, max_results=limit)
    log_event(
        logger,
        "INFO",
        "request.done",
        request_id=request_id,
        transfers=len(result.events),
        total_count=result.total_count,
        has_more=result.has_more,
        elapsed_us=elapsed_us(started_at),
    )
    return build_transfers_response(result)


def _page_start(start_day: date, days: int) -> date | None:
    try:
        return add_days(start_day, days)
    except InvalidDay:
        return None


@app.get("/schedule")
def schedule(
    request: Request,
    start: str | None = None,
    days: int = Query(DEFAULT_SCHEDULE_DAYS, ge=1, le=62),
):
    request_id = _request_id(request)
    log_event(logger, "INFO", "request.received", request_id=request_id, path="/schedule", start=start, days=days)

    start_day = (
        parse_day_param(start, "start", logger, request_id)
        if start is not None
        else datetime.now().date()
    )
    grid = engine.schedule_range(start_day, days)
    return build_schedule_response(
        engine.anchor,
        start_day,
        grid,
        previous_start=_page_start(start_day, -days),
        next_start=_page_start(start_day, days),
    )


@app.get("/teams/{team}/calendar.ics")
def team_calendar(
    team: int,
    request: Request,
    start: str | None = None,
    end: str | None = None,
    days: int = Query(30, ge=1, le=366),
    off_days: bool = True,
    shift_times: bool = True,
    tz: str = DEFAULT_EXPORT_TIMEZONE,
):
    request_id = _request_id(request)
    log_event(
        logger,
        "INFO",
        "request.received",
        request_id=request_id,
        path="/teams/{team}/calendar.ics",
        team=team,
        start=start,
        end=end,
        days=days,
        off_days=off_days,
        shift_times=shift_times,
        tz=tz,
    )

    start_day = (
        parse_day_param(start, "start", logger, request_id)
        if start is not None
        else datetime.now().date()
    )
    end_day = parse_day_param(end, "end", logger, request_id) if end is not None else add_days(start_day, days - 1)
    validate_export_request(engine.anchor, team, start_day, end_day, logger, request_id)

    started_at = time.perf_counter()
    export = engine.export_calendar(
        team,
        start_day,
        end_day,
        include_off_days=off_days,
        include_shift_times=shift_times,
        tz_name=tz,
    )
    log_event(
        logger,
        "INFO",
        "request.done",
        request_id=request_id,
        team=team,
        events=export.event_count,
        filename=export.filename,
        elapsed_us=elapsed_us(started_at),
    )
    return Response(
        content=export.content,
        media_type="text/calendar",
        headers={
            "Content-Disposition": f'attachment; filename="{export.filename}"',
            "X-Event-Count": str(export.event_count),
        },
    )
