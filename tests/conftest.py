"""Shared fixtures: the reference deployment anchored on 2025-07-16, team 1."""

from __future__ import annotations

from datetime import date

import pytest

from shiftclock.app.engine import ShiftEngine
from shiftclock.app.models import CycleAnchor

REFERENCE_DATE = date(2025, 7, 16)


@pytest.fixture
def anchor() -> CycleAnchor:
    return CycleAnchor(anchor_date=REFERENCE_DATE, anchor_team=1, team_count=5)


@pytest.fixture
def engine(anchor: CycleAnchor) -> ShiftEngine:
    return ShiftEngine(anchor)


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, engine: ShiftEngine):
    from fastapi.testclient import TestClient

    from shiftclock.app import main

    monkeypatch.setattr(main, "engine", engine)
    return TestClient(main.app)
