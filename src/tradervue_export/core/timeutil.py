"""Date formats and timezone-aware trade date parsing.

The remote API speaks ``mm/dd/yyyy``; archives are named ``yyyy-mm-dd``.
Trade dates are always derived in a single reference timezone (the US
equities session zone by default) so grouping does not depend on where the
process runs.
"""

from __future__ import annotations

from datetime import date, datetime
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigError, ParseError

DEFAULT_REFERENCE_TZ = "America/New_York"

API_DATE_FMT = "%m/%d/%Y"
FILE_DATE_FMT = "%Y-%m-%d"


@lru_cache(maxsize=8)
def reference_zone(name: str = DEFAULT_REFERENCE_TZ) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"unknown timezone {name!r}") from exc


def to_api_date(d: date) -> str:
    return d.strftime(API_DATE_FMT)


def to_file_date(d: date) -> str:
    return d.strftime(FILE_DATE_FMT)


def parse_file_date(value: str) -> date:
    """Parse a ``yyyy-mm-dd`` string."""
    try:
        return datetime.strptime(value, FILE_DATE_FMT).date()
    except ValueError as exc:
        raise ParseError(f"invalid date {value!r} (use yyyy-mm-dd)") from exc


def parse_trade_date(value: str, tz: ZoneInfo | None = None) -> date:
    """Calendar date of a trade timestamp in the reference timezone.

    Accepts ISO-8601 with an explicit offset (``2025-01-15T09:30:00-05:00``,
    trailing ``Z`` allowed) or a bare ``yyyy-mm-dd``. Naive date-times are
    rejected: without an offset the instant is ambiguous.
    """
    tz = tz or reference_zone()
    text = (value or "").strip()
    if not text:
        raise ParseError("empty trade timestamp")

    if len(text) == 10:
        try:
            return datetime.strptime(text, FILE_DATE_FMT).date()
        except ValueError as exc:
            raise ParseError(f"cannot parse date {value!r}") from exc

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ParseError(f"cannot parse date {value!r}") from exc
    if parsed.tzinfo is None:
        raise ParseError(f"timestamp {value!r} has no UTC offset")
    return parsed.astimezone(tz).date()
