"""Exhaust a paged trades listing for a date window.

The listing exposes no total count. Termination relies solely on the
short-page contract: a page holding fewer than ``page_size`` trades
(including an empty one) is the last. A remote source that keeps echoing
full pages would loop forever, so ``max_pages`` is a hard backstop that
fails the fetch instead of silently truncating the window.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterator

from tradervue_export.client.api import MAX_PER_PAGE, TradeSource
from tradervue_export.core.errors import PaginationLimitError
from tradervue_export.core.models import Trade

logger = logging.getLogger(__name__)


class PaginatedFetcher:
    """Page through ``TradeSource.list_trades`` until a short page."""

    def __init__(
        self,
        source: TradeSource,
        *,
        page_size: int = MAX_PER_PAGE,
        max_pages: int = 10_000,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        if max_pages < 1:
            raise ValueError("max_pages must be positive")
        self._source = source
        self._page_size = page_size
        self._max_pages = max_pages

    def iter_pages(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> Iterator[list[Trade]]:
        """Yield non-empty pages in remote order (newest first)."""
        page = 1
        while True:
            if page > self._max_pages:
                raise PaginationLimitError(
                    f"listing still returning full pages after {self._max_pages} pages "
                    f"(window {start} .. {end})"
                )

            trades = self._source.list_trades(start, end, page, self._page_size)
            logger.debug("Trades page %d: %d records", page, len(trades))
            if not trades:
                return
            yield trades

            if len(trades) < self._page_size:
                return
            page += 1

    def fetch_all(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Trade]:
        """Concatenate every page of the window, preserving remote order."""
        all_trades: list[Trade] = []
        pages = 0
        for batch in self.iter_pages(start, end):
            all_trades.extend(batch)
            pages += 1

        logger.info(
            "Fetched %d trades (%d pages) for %s .. %s",
            len(all_trades), pages, start or "-", end or "-",
        )
        return all_trades
