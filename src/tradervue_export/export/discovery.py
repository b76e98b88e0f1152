"""Locate the oldest trade in the account.

Used on a first run, when there is neither a progress cursor nor an explicit
start date. The listing is newest-first, so the last trade of the last page
is the oldest one. This is a linear scan over every page; remote throughput
dominates, so it is not worth anything cleverer.
"""

from __future__ import annotations

import logging
from datetime import date
from zoneinfo import ZoneInfo

from tradervue_export.core.errors import NoRecordsError, ParseError
from tradervue_export.core.models import Trade
from tradervue_export.core.timeutil import parse_trade_date, reference_zone

from .pagination import PaginatedFetcher

logger = logging.getLogger(__name__)

# Early enough that the whole account history is in range
DISCOVERY_START = date(2010, 1, 1)


class RangeDiscoverer:
    """Find the date of the single oldest trade."""

    def __init__(
        self,
        fetcher: PaginatedFetcher,
        *,
        tz: ZoneInfo | None = None,
        floor: date = DISCOVERY_START,
    ) -> None:
        self._fetcher = fetcher
        self._tz = tz or reference_zone()
        self._floor = floor

    def oldest_trade(self) -> Trade:
        """Return the oldest trade, or raise :class:`NoRecordsError`."""
        oldest: Trade | None = None
        for n, page in enumerate(self._fetcher.iter_pages(self._floor, None), start=1):
            oldest = page[-1]
            if n > 1:
                logger.info("  Scanning page %d...", n)

        if oldest is None:
            raise NoRecordsError("no records found in account")
        return oldest

    def first_trade_date(self) -> date:
        """Calendar date (reference timezone) of the oldest trade."""
        oldest = self.oldest_trade()
        try:
            return parse_trade_date(oldest.start_datetime, self._tz)
        except ParseError as exc:
            raise ParseError(
                f"oldest trade {oldest.id} has unparseable start {oldest.start_datetime!r}"
            ) from exc
