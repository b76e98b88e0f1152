"""Unit tests for short-page pagination."""

from __future__ import annotations

from datetime import date

import pytest

from tradervue_export.core.errors import PaginationLimitError
from tradervue_export.export import PaginatedFetcher

from tests.fakes import EchoingSource, FakeTradeSource, trades_on_days


class TestFetchAll:
    def test_exact_multiple_needs_one_empty_page(self):
        src = FakeTradeSource(trades_on_days(date(2025, 1, 1), 10))
        trades = PaginatedFetcher(src, page_size=5).fetch_all()
        assert len(trades) == 10
        assert [c[2] for c in src.list_calls] == [1, 2, 3]

    def test_short_page_terminates(self):
        src = FakeTradeSource(trades_on_days(date(2025, 1, 1), 7))
        trades = PaginatedFetcher(src, page_size=5).fetch_all()
        assert len(trades) == 7
        assert [c[2] for c in src.list_calls] == [1, 2]

    def test_empty_window(self):
        src = FakeTradeSource([])
        assert PaginatedFetcher(src, page_size=5).fetch_all() == []
        assert len(src.list_calls) == 1

    def test_preserves_remote_order(self):
        src = FakeTradeSource(trades_on_days(date(2025, 1, 1), 6))
        trades = PaginatedFetcher(src, page_size=4).fetch_all()
        assert [t.id for t in trades] == [6, 5, 4, 3, 2, 1]

    def test_window_and_page_size_forwarded(self):
        src = FakeTradeSource(trades_on_days(date(2025, 1, 1), 3))
        PaginatedFetcher(src, page_size=50).fetch_all(date(2025, 1, 2), date(2025, 1, 2))
        assert src.list_calls == [(date(2025, 1, 2), date(2025, 1, 2), 1, 50)]


class TestBackstop:
    def test_echoing_source_hits_page_ceiling(self):
        src = EchoingSource(trades_on_days(date(2025, 1, 1), 3))
        fetcher = PaginatedFetcher(src, page_size=3, max_pages=4)
        with pytest.raises(PaginationLimitError):
            fetcher.fetch_all()
        assert len(src.list_calls) == 4

    def test_ceiling_not_hit_when_last_page_is_short(self):
        src = FakeTradeSource(trades_on_days(date(2025, 1, 1), 5))
        assert len(PaginatedFetcher(src, page_size=2, max_pages=3).fetch_all()) == 5

    @pytest.mark.parametrize("kwargs", [{"page_size": 0}, {"max_pages": 0}])
    def test_rejects_non_positive_limits(self, kwargs):
        with pytest.raises(ValueError):
            PaginatedFetcher(FakeTradeSource(), **kwargs)
