"""Incremental export engine.

Key components
--------------
PaginatedFetcher    Exhausts a newest-first paged listing for a date window
RangeDiscoverer     Finds the oldest trade on a first run
DayAggregator       Buckets trades by reference-timezone calendar day
ArchiveStore        One JSON archive per calendar date
StateStore          Progress cursor (``state.json``)
ExportOrchestrator  Resolve window, fetch, aggregate, persist, advance cursor
"""

from .aggregator import Aggregation, DayAggregator
from .archive import ArchiveStore
from .discovery import RangeDiscoverer
from .orchestrator import ExportOptions, ExportOrchestrator, ExportResult, ExportStatus
from .pagination import PaginatedFetcher
from .state import StateStore

__all__ = [
    "Aggregation",
    "ArchiveStore",
    "DayAggregator",
    "ExportOptions",
    "ExportOrchestrator",
    "ExportResult",
    "ExportStatus",
    "PaginatedFetcher",
    "RangeDiscoverer",
    "StateStore",
]
