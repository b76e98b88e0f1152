"""Unit tests for the typed Tradervue endpoints."""

from __future__ import annotations

from datetime import date

import httpx
import pytest

from tradervue_export.client import RateLimitedTransport, TradervueClient
from tradervue_export.core.errors import ParseError


def _client(handler) -> TradervueClient:
    transport = RateLimitedTransport(
        "https://api.test/api/v1", "u", "p",
        min_interval=0.0, base_backoff=0.0,
        transport=httpx.MockTransport(handler),
    )
    return TradervueClient(transport)


class TestListTrades:
    def test_query_parameters_with_window(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"trades": []})

        _client(handler).list_trades(date(2025, 1, 2), date(2025, 3, 4), page=3, per_page=50)
        params = seen[0].url.params
        assert params["count"] == "50"
        assert params["page"] == "3"
        assert params["startdate"] == "01/02/2025"
        assert params["enddate"] == "03/04/2025"

    def test_open_window_omits_dates(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"trades": []})

        _client(handler).list_trades(None, None, page=1)
        params = seen[0].url.params
        assert "startdate" not in params
        assert "enddate" not in params
        assert params["count"] == "100"

    def test_decodes_trades_and_keeps_unknown_fields(self):
        body = {"trades": [
            {"id": 7, "symbol": "AAPL", "side": "L", "gross_pl": 12.5,
             "start_datetime": "2025-01-15T09:30:00-05:00", "account_tag": "ira"},
            {"id": "abc", "symbol": "TSLA", "side": "S"},
        ]}
        trades = _client(lambda r: httpx.Response(200, json=body)).list_trades(None, None, 1)

        assert [t.id for t in trades] == [7, "abc"]
        assert trades[0].gross_pl == 12.5
        assert trades[0].model_dump()["account_tag"] == "ira"
        assert trades[1].key == "abc"

    def test_null_fields_decode_to_defaults(self):
        body = {"trades": [{
            "id": 3, "symbol": "AAPL", "start_datetime": None, "notes": None,
            "tags": None, "volume": None, "exit_price": None, "broker": None,
        }]}
        trade = _client(lambda r: httpx.Response(200, json=body)).list_trades(None, None, 1)[0]

        assert trade.start_datetime == ""
        assert trade.notes == ""
        assert trade.tags == []
        assert trade.volume == 0
        assert trade.exit_price is None
        assert trade.model_dump()["broker"] is None

    def test_non_string_timestamp_is_kept_as_text(self):
        body = {"trades": [{"id": 4, "start_datetime": 1736951400}]}
        trade = _client(lambda r: httpx.Response(200, json=body)).list_trades(None, None, 1)[0]
        assert trade.start_datetime == "1736951400"

    def test_missing_trades_key_is_empty_page(self):
        trades = _client(lambda r: httpx.Response(200, json={})).list_trades(None, None, 1)
        assert trades == []

    def test_wrong_shape_is_parse_error(self):
        handler = lambda r: httpx.Response(200, json={"trades": "nope"})  # noqa: E731
        with pytest.raises(ParseError, match="/trades"):
            _client(handler).list_trades(None, None, 1)


class TestGetExecutions:
    def test_path_and_decoding(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"executions": [
                {"id": 1, "datetime": "2025-01-15T09:30:00-05:00", "symbol": "AAPL",
                 "quantity": 100, "price": 10.0},
                {"id": 2, "symbol": "AAPL", "quantity": -100, "price": 11.0},
            ]})

        execs = _client(handler).get_executions(42)
        assert seen[0].url.path == "/api/v1/trades/42/executions"
        assert [e.quantity for e in execs] == [100, -100]

    def test_not_a_mapping_is_parse_error(self):
        with pytest.raises(ParseError):
            _client(lambda r: httpx.Response(200, json=[1, 2])).get_executions(1)
