"""In-memory stand-ins for the remote Tradervue account."""

from __future__ import annotations

import json
import re
import time
from datetime import date, datetime, timedelta, timezone
from typing import Any
from urllib.parse import parse_qs

import httpx

from tradervue_export.core.errors import ParseError, TransientError
from tradervue_export.core.models import Execution, Trade, TradeId
from tradervue_export.core.timeutil import API_DATE_FMT, parse_trade_date

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def make_trade(
    trade_id: int = 1,
    start: str = "2025-01-15T09:30:00-05:00",
    symbol: str = "AAPL",
    side: str = "L",
    gross_pl: float = 10.0,
    commission: float = 1.0,
    fees: float = 0.5,
    volume: int = 100,
    **extra: Any,
) -> Trade:
    return Trade(
        id=trade_id,
        symbol=symbol,
        side=side,
        start_datetime=start,
        gross_pl=gross_pl,
        commission=commission,
        fees=fees,
        volume=volume,
        **extra,
    )


def make_execution(exec_id: int, symbol: str = "AAPL", quantity: int = 100) -> Execution:
    return Execution(
        id=exec_id,
        datetime="2025-01-15T09:30:00-05:00",
        symbol=symbol,
        quantity=quantity,
        price=100.0,
    )


def trades_on_days(
    first_day: date,
    n_days: int,
    per_day: int = 1,
    start_id: int = 1,
) -> list[Trade]:
    """``per_day`` trades at 10:00 New York time on each of ``n_days`` days."""
    trades = []
    tid = start_id
    for d in range(n_days):
        day = first_day + timedelta(days=d)
        for k in range(per_day):
            trades.append(make_trade(
                trade_id=tid,
                start=f"{day.isoformat()}T10:{k:02d}:00-05:00",
                symbol="AAPL" if tid % 2 else "TSLA",
                side="L" if tid % 3 else "S",
                gross_pl=float(tid % 7) - 3.0,
            ))
            tid += 1
    return trades


def _instant(trade: Trade) -> datetime:
    try:
        return datetime.fromisoformat(trade.start_datetime.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH


def _in_window(trade: Trade, start: date | None, end: date | None) -> bool:
    try:
        day = parse_trade_date(trade.start_datetime)
    except ParseError:
        return True
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


class FakeTradeSource:
    """Newest-first paged listing over a fixed set of trades."""

    def __init__(
        self,
        trades: list[Trade] | None = None,
        executions: dict[TradeId, list[Execution]] | None = None,
        failing_executions: set[TradeId] | None = None,
    ) -> None:
        self.trades = list(trades or [])
        self.executions = executions or {}
        self.failing_executions = failing_executions or set()
        self.list_calls: list[tuple[date | None, date | None, int, int]] = []
        self.execution_calls: list[TradeId] = []

    def _ordered(self, start: date | None, end: date | None) -> list[Trade]:
        matching = [t for t in self.trades if _in_window(t, start, end)]
        return sorted(matching, key=lambda t: (_instant(t), str(t.id)), reverse=True)

    def list_trades(self, start_date, end_date, page, per_page=100):
        self.list_calls.append((start_date, end_date, page, per_page))
        ordered = self._ordered(start_date, end_date)
        lo = (page - 1) * per_page
        return ordered[lo:lo + per_page]

    def get_executions(self, trade_id):
        self.execution_calls.append(trade_id)
        if trade_id in self.failing_executions:
            raise TransientError(f"server error (HTTP 503) for trade {trade_id}")
        return list(self.executions.get(trade_id, []))


class EchoingSource(FakeTradeSource):
    """Misbehaving source that returns the same full page forever."""

    def __init__(self, page: list[Trade]) -> None:
        super().__init__(page)
        self._page = page

    def list_trades(self, start_date, end_date, page, per_page=100):
        self.list_calls.append((start_date, end_date, page, per_page))
        return list(self._page)


class FakeTradervueServer:
    """``httpx.MockTransport`` handler emulating the Tradervue REST API."""

    _EXEC_PATH = re.compile(r"/api/v1/trades/([^/]+)/executions$")

    def __init__(
        self,
        trades: list[Trade] | None = None,
        executions: dict[TradeId, list[Execution]] | None = None,
    ) -> None:
        self.source = FakeTradeSource(trades, executions)
        self.requests: list[httpx.Request] = []
        self.request_times: list[float] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.request_times.append(time.monotonic())
        self.requests.append(request)

        path = request.url.path
        if path == "/api/v1/trades":
            query = parse_qs(request.url.query.decode())
            start = _api_date(query.get("startdate"))
            end = _api_date(query.get("enddate"))
            page = int(query["page"][0])
            count = int(query["count"][0])
            trades = self.source.list_trades(start, end, page, count)
            body = {"trades": [t.model_dump(mode="json") for t in trades]}
            return httpx.Response(200, content=json.dumps(body))

        match = self._EXEC_PATH.match(path)
        if match:
            raw_id = match.group(1)
            trade_id: TradeId = int(raw_id) if raw_id.isdigit() else raw_id
            try:
                execs = self.source.get_executions(trade_id)
            except TransientError:
                return httpx.Response(503, text="service unavailable")
            body = {"executions": [e.model_dump(mode="json") for e in execs]}
            return httpx.Response(200, content=json.dumps(body))

        return httpx.Response(404, text="not found")


def _api_date(values: list[str] | None) -> date | None:
    if not values:
        return None
    return datetime.strptime(values[0], API_DATE_FMT).date()
