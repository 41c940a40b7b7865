import pytest


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_config(client):
    body = client.get("/config").json()
    assert body["anchor_date"] == "2025-07-16"
    assert body["team_count"] == 5
    assert body["max_transfers"] == 20


def test_teams_for_date(client):
    body = client.get("/teams", params={"date": "2025-07-16"}).json()
    assert body["date"] == "2025-07-16"
    assert [t["shift"]["code"] for t in body["teams"]] == ["M", "O", "O", "N", "E"]
    assert body["teams"][0]["code"] == "2529.3M"
    assert body["on_duty_team"] is None


def test_teams_at_instant(client):
    body = client.get("/teams", params={"at": "2025-07-17T02:00:00"}).json()
    assert body["date"] == "2025-07-16"
    assert body["on_duty_team"] == 4


def test_teams_invalid_date(client):
    response = client.get("/teams", params={"date": "someday"})
    assert response.status_code == 422


def test_team_shift_off_day(client):
    body = client.get("/teams/1/shift", params={"at": "2025-07-22T12:00:00"}).json()
    assert body["shift_day"] == "2025-07-22"
    assert body["current"]["shift"]["code"] == "O"
    assert body["on_duty"] is False
    assert body["off_day_progress"] == {"current": 1, "total": 4}
    assert body["next_shift"]["date"] == "2025-07-26"
    assert body["countdown"]["formatted"] == "3d 19h 0m"
    assert body["timeline"] is None


def test_team_shift_during_night(client):
    body = client.get("/teams/1/shift", params={"at": "2025-07-21T03:00:00"}).json()
    assert body["shift_day"] == "2025-07-20"
    assert body["current"]["code"] == "2529.6N"
    assert body["on_duty"] is True
    assert body["off_day_progress"] is None
    assert body["timeline"]["previous"]["team"] == 2
    assert body["timeline"]["following"]["team"] == 3


def test_team_shift_invalid_team(client):
    response = client.get("/teams/9/shift", params={"at": "2025-07-22T12:00:00"})
    assert response.status_code == 422
    assert "between 1 and 5" in response.json()["detail"]


def test_team_shift_accepts_utc_suffix(client):
    response = client.get("/teams/1/shift", params={"at": "2025-07-22T12:00:00Z"})
    assert response.status_code == 200
    body = response.json()
    assert body["at"] == "2025-07-22T12:00:00+00:00"
    assert body["shift_day"] == "2025-07-22"
    assert body["countdown"]["formatted"] == "3d 19h 0m"


def test_team_shift_invalid_instant(client):
    assert client.get("/teams/1/shift", params={"at": "noon"}).status_code == 422


def test_transfers(client):
    body = client.get(
        "/teams/1/transfers",
        params={"other": 2, "start": "2025-07-16", "end": "2025-07-26"},
    ).json()
    assert body["has_more"] is False
    assert body["total_count"] == 4
    assert [t["date"] for t in body["transfers"]] == ["2025-07-18", "2025-07-19", "2025-07-20", "2025-07-21"]
    first = body["transfers"][0]
    assert (first["from_team"], first["to_team"], first["from_shift"], first["to_shift"]) == (2, 1, "M", "E")
    assert first["is_handover"] is False


def test_transfers_limit(client):
    body = client.get(
        "/teams/1/transfers",
        params={"other": 2, "start": "2025-07-16", "end": "2025-07-26", "limit": 2},
    ).json()
    assert len(body["transfers"]) == 2
    assert body["has_more"] is True
    assert body["total_count"] == 4


def test_transfers_lookahead_days(client):
    body = client.get("/teams/1/transfers", params={"other": 2, "start": "2025-07-16", "days": 3}).json()
    assert [t["date"] for t in body["transfers"]] == ["2025-07-18", "2025-07-19"]


def test_transfers_rejects_same_team(client):
    response = client.get("/teams/1/transfers", params={"other": 1, "start": "2025-07-16", "end": "2025-07-26"})
    assert response.status_code == 422


def test_transfers_rejects_inverted_range(client):
    response = client.get("/teams/1/transfers", params={"other": 2, "start": "2025-07-26", "end": "2025-07-16"})
    assert response.status_code == 422


def test_transfers_rejects_long_range(client):
    response = client.get("/teams/1/transfers", params={"other": 2, "start": "2025-01-01", "end": "2026-12-31"})
    assert response.status_code == 422


def test_transfers_rejects_unknown_other_team(client):
    response = client.get("/teams/1/transfers", params={"other": 8, "start": "2025-07-16", "end": "2025-07-26"})
    assert response.status_code == 422


def test_schedule_week(client):
    body = client.get("/schedule", params={"start": "2025-07-16"}).json()
    assert body["start"] == "2025-07-16"
    assert body["days"] == 7
    assert body["previous_start"] == "2025-07-09"
    assert body["next_start"] == "2025-07-23"
    first = body["columns"][0]
    assert first["date"] == "2025-07-16"
    assert first["date_code"] == "2529.3"
    assert first["weekday"] == "Wed"
    assert first["shifts"] == {"1": "M", "2": "O", "3": "O", "4": "N", "5": "E"}
    assert [s["shift"]["code"] for s in body["teams"][0]["shifts"]] == list("MMEENNO")


def test_schedule_custom_length(client):
    body = client.get("/schedule", params={"start": "2025-07-16", "days": 3}).json()
    assert len(body["columns"]) == 3
    assert body["next_start"] == "2025-07-19"


def test_schedule_rejects_bad_input(client):
    assert client.get("/schedule", params={"days": 0}).status_code == 422
    assert client.get("/schedule", params={"start": "soon"}).status_code == 422


def test_calendar_export(client):
    response = client.get("/teams/1/calendar.ics", params={"start": "2025-07-16", "end": "2025-07-22"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert 'filename="Shiftclock_Team1_2025-07-16_to_2025-07-22.ics"' in response.headers["content-disposition"]
    assert response.headers["x-event-count"] == "7"
    assert response.content.count(b"BEGIN:VEVENT") == 7
    assert b"BEGIN:VTIMEZONE" in response.content


def test_calendar_export_without_off_days(client):
    response = client.get(
        "/teams/1/calendar.ics",
        params={"start": "2025-07-16", "end": "2025-07-22", "off_days": "false"},
    )
    assert response.headers["x-event-count"] == "6"


def test_calendar_export_default_range(client):
    response = client.get("/teams/1/calendar.ics", params={"start": "2025-07-16", "days": 1})
    assert 'filename="Shiftclock_Team1_2025-07-16.ics"' in response.headers["content-disposition"]


@pytest.mark.parametrize(
    "path, params",
    [
        ("/teams/9/calendar.ics", {"start": "2025-07-16", "end": "2025-07-22"}),
        ("/teams/1/calendar.ics", {"start": "2025-07-22", "end": "2025-07-16"}),
        ("/teams/1/calendar.ics", {"start": "2025-07-16", "end": "2026-07-17"}),
        ("/teams/1/calendar.ics", {"start": "2025-07-16", "end": "2025-07-22", "tz": "Mars/Olympus_Mons"}),
    ],
)
def test_calendar_export_rejections(client, path, params):
    assert client.get(path, params=params).status_code == 422
