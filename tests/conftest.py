"""Shared fixtures for the tradervue-export test suite."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime, timezone

import pytest

from tradervue_export.core.clock import FrozenClock
from tradervue_export.export import ExportOrchestrator

from tests.fakes import FakeTradeSource, trades_on_days


@pytest.fixture
def frozen_clock() -> FrozenClock:
    """Noon in New York on 2025-05-10."""
    return FrozenClock(datetime(2025, 5, 10, 16, 0, tzinfo=timezone.utc))


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def week_of_trades():
    """Two trades per day, 2025-05-01 .. 2025-05-07."""
    return trades_on_days(date(2025, 5, 1), 7, per_day=2)


@pytest.fixture
def source(week_of_trades) -> FakeTradeSource:
    return FakeTradeSource(week_of_trades)


@pytest.fixture
def make_orchestrator(data_dir, frozen_clock):
    """Factory: orchestrator over a fake source with a small page size."""

    def _make(src, *, page_size: int = 5, clock=None, directory=None) -> ExportOrchestrator:
        return ExportOrchestrator(
            src,
            directory or data_dir,
            clock=clock or frozen_clock,
            page_size=page_size,
        )

    return _make


@pytest.fixture
def restore_root_logging():
    """Undo handler/level changes made by ``setup_logging``."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No ambient ``.env`` file or TVUE_/TRADERVUE_ variables."""
    for key in list(os.environ):
        if key.upper().startswith(("TVUE_", "TRADERVUE_")):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
