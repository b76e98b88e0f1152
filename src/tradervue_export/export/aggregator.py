"""Group trades into calendar-day buckets and optionally attach executions.

Dates come from each trade's ``start_datetime`` converted to a fixed
reference timezone (the trading-session zone), never the process's local
zone, so the same data buckets identically wherever the tool runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from zoneinfo import ZoneInfo

from tradervue_export.client.api import TradeSource
from tradervue_export.core.errors import ExportError, ParseError
from tradervue_export.core.models import DayBucket, Execution, Trade
from tradervue_export.core.timeutil import parse_trade_date, reference_zone

logger = logging.getLogger(__name__)


@dataclass
class Aggregation:
    """Outcome of grouping (and optionally enriching) one fetched window."""

    buckets: list[DayBucket] = field(default_factory=list)
    skipped: list[Trade] = field(default_factory=list)  # unparseable start
    enrichment_failures: int = 0  # buckets archived without executions

    @property
    def trade_count(self) -> int:
        return sum(len(b.trades) for b in self.buckets)


class DayAggregator:
    """Partition trades into :class:`DayBucket` objects.

    Parameters
    ----------
    tz:
        Reference timezone for date bucketing.
    source:
        Remote source used for execution lookups. Required only when
        ``aggregate(..., with_executions=True)`` is used.
    """

    def __init__(
        self,
        *,
        tz: ZoneInfo | None = None,
        source: TradeSource | None = None,
    ) -> None:
        self._tz = tz or reference_zone()
        self._source = source

    def aggregate(self, trades: list[Trade], *, with_executions: bool = False) -> Aggregation:
        result = self.group(trades)
        if with_executions:
            result.enrichment_failures = self.enrich(result.buckets)
        return result

    # ------------------------------------------------------------------
    # Grouping
    # ------------------------------------------------------------------

    def group(self, trades: list[Trade]) -> Aggregation:
        """Bucket trades by date; skip (and log) unparseable timestamps.

        Buckets are ordered by ascending date; trades keep fetch order
        within a bucket.
        """
        by_date: dict[date, list[Trade]] = {}
        skipped: list[Trade] = []

        for trade in trades:
            try:
                day = parse_trade_date(trade.start_datetime, self._tz)
            except ParseError:
                logger.warning(
                    "Skipping trade %s with unparseable date %r",
                    trade.id, trade.start_datetime,
                )
                skipped.append(trade)
                continue
            by_date.setdefault(day, []).append(trade)

        buckets = [DayBucket(date=d, trades=by_date[d]) for d in sorted(by_date)]
        return Aggregation(buckets=buckets, skipped=skipped)

    # ------------------------------------------------------------------
    # Enrichment
    # ------------------------------------------------------------------

    def enrich(self, buckets: list[DayBucket]) -> int:
        """Attach executions to every bucket, one remote call per trade.

        A failed lookup degrades that bucket to "no executions" and the run
        carries on. Returns the number of degraded buckets.
        """
        if self._source is None:
            raise RuntimeError("DayAggregator has no source for execution lookups")

        failures = 0
        for bucket in buckets:
            try:
                bucket.executions = self._fetch_executions(bucket.trades)
            except _ExecutionLookupFailed as exc:
                logger.warning(
                    "Failed to fetch executions for %s (trade %s): %s",
                    bucket.date, exc.trade_id, exc.__cause__,
                )
                bucket.executions = None
                failures += 1
        return failures

    def _fetch_executions(self, trades: list[Trade]) -> dict[str, list[Execution]]:
        assert self._source is not None
        result: dict[str, list[Execution]] = {}
        for trade in trades:
            try:
                execs = self._source.get_executions(trade.id)
            except ExportError as exc:
                raise _ExecutionLookupFailed(trade.id) from exc
            if execs:
                result[trade.key] = execs
        return result


class _ExecutionLookupFailed(Exception):
    def __init__(self, trade_id: object) -> None:
        self.trade_id = trade_id
        super().__init__(f"executions lookup failed for trade {trade_id}")
