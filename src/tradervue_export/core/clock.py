"""Clock abstraction for the export run.

WallClock: real wall-clock time (normal runs)
FrozenClock: fixed, manually advanced time (tests, reproducible re-exports)

The orchestrator never calls datetime.now() directly; "today" and export
timestamps always come from the injected clock.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Protocol


class IClock(Protocol):
    """Clock interface used by all time-dependent code."""

    def now(self) -> datetime:
        """Current time as timezone-aware UTC datetime."""
        ...


class WallClock:
    """Real wall-clock time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    """Clock pinned to a fixed instant until explicitly advanced."""

    def __init__(self, at: datetime | None = None) -> None:
        at = at or datetime(2025, 1, 1, tzinfo=timezone.utc)
        if at.tzinfo is None:
            raise ValueError("FrozenClock requires a timezone-aware datetime")
        self._time = at.astimezone(timezone.utc)

    def now(self) -> datetime:
        return self._time

    def advance(self, delta: timedelta) -> None:
        if delta < timedelta(0):
            raise ValueError(f"FrozenClock cannot go backwards: {delta}")
        self._time = self._time + delta


def today_in(clock: IClock, tz: tzinfo) -> date:
    """Calendar date of ``clock.now()`` in *tz*."""
    return clock.now().astimezone(tz).date()
