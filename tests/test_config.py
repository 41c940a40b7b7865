from datetime import date
from unittest.mock import MagicMock

import pytest

from shiftclock.app import engine_config
from shiftclock.app.engine import ShiftEngine
from shiftclock.app.engine_config import (
    ANCHOR_DATE_ENV,
    ANCHOR_TEAM_ENV,
    MAX_TRANSFERS_ENV,
    TEAM_COUNT_ENV,
    load_anchor,
    load_max_transfers,
)
from shiftclock.app.models import ShiftKind


@pytest.fixture
def config_logger(monkeypatch):
    logger = MagicMock()
    monkeypatch.setattr(engine_config, "logger", logger)
    return logger


class TestLoadAnchor:
    def test_defaults(self, config_logger):
        anchor = load_anchor({})
        assert anchor.anchor_date == date(2025, 1, 6)
        assert anchor.anchor_team == 1
        assert anchor.team_count == 5
        assert anchor.cycle_length_days == 10
        config_logger.warning.assert_not_called()

    def test_overrides(self, config_logger):
        anchor = load_anchor({ANCHOR_DATE_ENV: "2025-07-16", ANCHOR_TEAM_ENV: "3", TEAM_COUNT_ENV: "5"})
        assert anchor.anchor_date == date(2025, 7, 16)
        assert anchor.anchor_team == 3

    def test_blank_values_use_defaults(self, config_logger):
        anchor = load_anchor({ANCHOR_DATE_ENV: "  ", ANCHOR_TEAM_ENV: ""})
        assert anchor.anchor_date == date(2025, 1, 6)
        assert anchor.anchor_team == 1
        config_logger.warning.assert_not_called()

    @pytest.mark.parametrize("raw", ["16/07/2025", "2025-02-30", "soon"])
    def test_invalid_date_falls_back(self, config_logger, raw):
        anchor = load_anchor({ANCHOR_DATE_ENV: raw})
        assert anchor.anchor_date == date(2025, 1, 6)
        config_logger.warning.assert_called_once()
        assert "config.fallback" in config_logger.warning.call_args[0][0]

    @pytest.mark.parametrize("raw", ["0", "-2", "two", "1.5"])
    def test_invalid_team_falls_back(self, config_logger, raw):
        assert load_anchor({ANCHOR_TEAM_ENV: raw}).anchor_team == 1
        config_logger.warning.assert_called_once()

    def test_team_beyond_team_count_falls_back(self, config_logger):
        anchor = load_anchor({ANCHOR_TEAM_ENV: "6"})
        assert anchor.anchor_team == 1
        config_logger.warning.assert_called_once()

    def test_invalid_team_count_falls_back(self, config_logger):
        assert load_anchor({TEAM_COUNT_ENV: "0"}).team_count == 5

    def test_default_anchor_agrees_with_reference_deployment(self, config_logger):
        engine = ShiftEngine(load_anchor({}))
        assert engine.assign_shift(date(2025, 7, 16), 1).kind is ShiftKind.MORNING

    def test_reads_process_environment(self, monkeypatch, config_logger):
        monkeypatch.setenv(ANCHOR_DATE_ENV, "2025-07-16")
        monkeypatch.setenv(ANCHOR_TEAM_ENV, "2")
        anchor = load_anchor()
        assert anchor.anchor_date == date(2025, 7, 16)
        assert anchor.anchor_team == 2


class TestLoadMaxTransfers:
    def test_default(self, config_logger):
        assert load_max_transfers({}) == 20

    def test_override(self, config_logger):
        assert load_max_transfers({MAX_TRANSFERS_ENV: "50"}) == 50

    def test_invalid_falls_back(self, config_logger):
        assert load_max_transfers({MAX_TRANSFERS_ENV: "-3"}) == 20
        config_logger.warning.assert_called_once()

    def test_engine_from_env(self, config_logger):
        engine = ShiftEngine.from_env({MAX_TRANSFERS_ENV: "2", ANCHOR_DATE_ENV: "2025-07-16"})
        assert engine.max_transfers == 2
        result = engine.detect_transfers(1, 2, "2025-07-16", "2025-07-26")
        assert len(result.events) == 2
        assert result.has_more
