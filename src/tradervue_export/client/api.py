"""Typed Tradervue endpoints on top of :class:`RateLimitedTransport`."""

from __future__ import annotations

from datetime import date
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from tradervue_export.core.errors import ParseError
from tradervue_export.core.models import (
    Execution,
    ExecutionsPage,
    Trade,
    TradeId,
    TradesPage,
)
from tradervue_export.core.timeutil import to_api_date

from .transport import RateLimitedTransport

MAX_PER_PAGE = 100


class TradeSource(Protocol):
    """What the export engine needs from the remote account."""

    def list_trades(
        self,
        start_date: date | None,
        end_date: date | None,
        page: int,
        per_page: int = MAX_PER_PAGE,
    ) -> list[Trade]:
        ...

    def get_executions(self, trade_id: TradeId) -> list[Execution]:
        ...


class TradervueClient:
    """Tradervue API client.

    The trades listing is newest-first, 1-based, and carries no total
    count; callers paginate until a short page.
    """

    def __init__(self, transport: RateLimitedTransport) -> None:
        self._transport = transport

    def list_trades(
        self,
        start_date: date | None,
        end_date: date | None,
        page: int,
        per_page: int = MAX_PER_PAGE,
    ) -> list[Trade]:
        """Fetch one page of trades, optionally bounded by date (inclusive)."""
        params: dict[str, Any] = {"count": per_page, "page": page}
        if start_date is not None:
            params["startdate"] = to_api_date(start_date)
        if end_date is not None:
            params["enddate"] = to_api_date(end_date)

        body = self._transport.get("/trades", params)
        return _validate(TradesPage, body, "/trades").trades

    def get_executions(self, trade_id: TradeId) -> list[Execution]:
        """Fetch all executions of one trade (unordered)."""
        path = f"/trades/{trade_id}/executions"
        body = self._transport.get(path)
        return _validate(ExecutionsPage, body, path).executions


def _validate(model: Any, body: Any, path: str) -> Any:
    try:
        return model.model_validate(body)
    except PydanticValidationError as exc:
        raise ParseError(f"unexpected response shape from {path}: {exc}") from exc
