"""End-to-end incremental export run.

State machine::

    ResolveWindow -> Fetch -> Aggregate -> PersistEach -> UpdateCursor -> Done
          |
          +-> UpToDate   (start > end)

The cursor is all-or-nothing per run: it is saved only after every day
archive of the window has been written. A run that fails (or is killed)
part-way leaves the archives it finished on disk and the cursor where it
was, so the next run redoes the same window and overwrites those dates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from pathlib import Path
from zoneinfo import ZoneInfo

from tradervue_export.client.api import MAX_PER_PAGE, TradeSource
from tradervue_export.core.clock import IClock, WallClock, today_in
from tradervue_export.core.models import DayArchive, ProgressCursor, Trade
from tradervue_export.core.timeutil import reference_zone, to_file_date

from .aggregator import DayAggregator
from .archive import ArchiveStore
from .discovery import DISCOVERY_START, RangeDiscoverer
from .pagination import PaginatedFetcher
from .state import StateStore

logger = logging.getLogger(__name__)


class ExportStatus(str, Enum):
    EXPORTED = "exported"
    UP_TO_DATE = "up_to_date"
    NO_TRADES = "no_trades_in_window"


@dataclass(frozen=True)
class ExportOptions:
    """Caller-controlled knobs for one run."""

    start: date | None = None  # explicit window start (inclusive)
    end: date | None = None  # explicit window end (inclusive)
    with_executions: bool = False
    force: bool = False  # ignore the cursor and re-export from discovery


@dataclass
class ExportResult:
    status: ExportStatus
    start: date | None = None
    end: date | None = None
    dates: list[date] = field(default_factory=list)
    trades: int = 0
    skipped: int = 0
    enrichment_failures: int = 0

    @property
    def days(self) -> int:
        return len(self.dates)


class ExportOrchestrator:
    """Compose fetch, aggregation and persistence into one run.

    Parameters
    ----------
    source:
        Remote trades source (normally a ``TradervueClient``).
    data_dir:
        Root of the local archive (``trades/`` and ``state.json``).
    clock:
        Time source for "today" and export timestamps.
    tz:
        Reference timezone for date bucketing and "today".
    page_size, max_pages:
        Pagination size and backstop.
    discovery_start:
        Artificial lower bound used to scan the whole history.
    """

    def __init__(
        self,
        source: TradeSource,
        data_dir: str | Path,
        *,
        clock: IClock | None = None,
        tz: ZoneInfo | None = None,
        page_size: int = MAX_PER_PAGE,
        max_pages: int = 10_000,
        discovery_start: date = DISCOVERY_START,
    ) -> None:
        self._clock = clock or WallClock()
        self._tz = tz or reference_zone()
        self._fetcher = PaginatedFetcher(source, page_size=page_size, max_pages=max_pages)
        self._discoverer = RangeDiscoverer(self._fetcher, tz=self._tz, floor=discovery_start)
        self._aggregator = DayAggregator(tz=self._tz, source=source)
        self.archives = ArchiveStore(data_dir)
        self.state = StateStore(data_dir)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, options: ExportOptions | None = None) -> ExportResult:
        """Execute one export run. Errors propagate with the cursor untouched."""
        options = options or ExportOptions()
        cursor = self.state.load()

        start, end = self.resolve_window(options, cursor)
        if start > end:
            logger.info("Already up to date. No new trades to export.")
            return ExportResult(status=ExportStatus.UP_TO_DATE, start=start, end=end)

        logger.info("Exporting trades from %s to %s...", to_file_date(start), to_file_date(end))
        trades = self._fetcher.fetch_all(start, end)
        if not trades:
            logger.info("No trades found in the date range.")
            return ExportResult(status=ExportStatus.NO_TRADES, start=start, end=end)

        agg = self._aggregator.aggregate(trades, with_executions=options.with_executions)
        if not agg.buckets:
            logger.warning("All %d fetched trades had unparseable dates.", len(agg.skipped))
            return ExportResult(
                status=ExportStatus.NO_TRADES, start=start, end=end, skipped=len(agg.skipped),
            )

        exported_at = self._clock.now()
        for bucket in agg.buckets:
            self.archives.write(DayArchive(
                date=bucket.date,
                trades=bucket.trades,
                executions=bucket.executions,
                exported_at=exported_at,
            ))
            logger.info(
                "  %s: %d trades [%s]",
                to_file_date(bucket.date), len(bucket.trades), summarize_symbols(bucket.trades),
            )

        dates = [b.date for b in agg.buckets]
        self.state.save(self._advance_cursor(cursor, dates, agg.trade_count))

        logger.info("Export complete: %d days, %d trades", len(dates), agg.trade_count)
        return ExportResult(
            status=ExportStatus.EXPORTED,
            start=start,
            end=end,
            dates=dates,
            trades=agg.trade_count,
            skipped=len(agg.skipped),
            enrichment_failures=agg.enrichment_failures,
        )

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def resolve_window(
        self,
        options: ExportOptions,
        cursor: ProgressCursor | None,
    ) -> tuple[date, date]:
        """Compute the inclusive [start, end] window of this run."""
        if options.start is not None:
            start = options.start
        elif cursor is not None and cursor.last_export_date is not None and not options.force:
            start = cursor.last_export_date + timedelta(days=1)
        else:
            logger.info("First run: discovering first trade date...")
            start = self._discoverer.first_trade_date()
            logger.info("First trade found on: %s", to_file_date(start))

        end = options.end if options.end is not None else today_in(self._clock, self._tz)
        return start, end

    def _advance_cursor(
        self,
        previous: ProgressCursor | None,
        dates: list[date],
        trade_count: int,
    ) -> ProgressCursor:
        cursor = previous.model_copy() if previous is not None else ProgressCursor()
        first, last = dates[0], dates[-1]
        if cursor.first_trade_date is None or first < cursor.first_trade_date:
            cursor.first_trade_date = first
        if cursor.last_export_date is None or last > cursor.last_export_date:
            cursor.last_export_date = last
        cursor.total_trades += trade_count
        cursor.total_days += len(dates)
        cursor.last_run_at = self._clock.now()
        return cursor


def summarize_symbols(trades: list[Trade]) -> str:
    """Compact per-symbol side digest, e.g. ``"SNGX(L) MULN(S) AAPL(L/S)"``."""
    sides: dict[str, str] = {}
    for t in trades:
        existing = sides.get(t.symbol)
        if existing is None:
            sides[t.symbol] = t.side
        elif existing != t.side:
            sides[t.symbol] = "L/S"
    return " ".join(f"{sym}({side})" for sym, side in sides.items())
