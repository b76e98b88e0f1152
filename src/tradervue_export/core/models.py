"""Core domain models for the exporter.

Trade and Execution mirror the remote API records; DayBucket, DayArchive
and ProgressCursor are the local archive's own types. Everything that is
persisted is a pydantic model so that field order (and therefore the bytes
on disk) is stable across re-exports.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TradeId = int | str


# ---------------------------------------------------------------------------
# Remote records
# ---------------------------------------------------------------------------

class _RemoteRecord(BaseModel):
    """Lenient decoding shared by remote records.

    A JSON null on a field with a non-null default decodes to that default
    (``""``, ``0``, ``[]``), the same as an absent field.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    @model_validator(mode="before")
    @classmethod
    def _null_as_default(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        fields = cls.model_fields
        return {
            key: value
            for key, value in data.items()
            if not (
                value is None
                and key in fields
                and not fields[key].is_required()
                and fields[key].default is not None
            )
        }


class Execution(_RemoteRecord):
    """A single fill within a trade."""

    id: TradeId
    datetime: str = ""
    symbol: str = ""
    quantity: int = 0  # positive = buy, negative = sell
    price: float = 0.0
    commission: float = 0.0
    trans_fee: float = 0.0
    ecn_fee: float = 0.0

    @field_validator("datetime", mode="before")
    @classmethod
    def _timestamp_as_text(cls, value: Any) -> Any:
        return value if isinstance(value, str) else str(value)


class Trade(_RemoteRecord):
    """A single trade as returned by the remote listing.

    ``start_datetime`` is kept as text (null becomes ``""``, other non-strings
    their ``str()``) and only parsed when the trade is bucketed by day, so a
    malformed timestamp drops that trade instead of rejecting its page.
    Unknown remote fields are preserved.
    """

    id: TradeId
    symbol: str = ""
    volume: int = 0
    open: bool = False
    side: str = ""  # "L" = Long, "S" = Short
    entry_price: float = 0.0
    exit_price: float | None = None
    gross_pl: float = 0.0
    native_pl: float | None = None
    native_currency: str | None = None
    commission: float = 0.0
    fees: float = 0.0
    start_datetime: str = ""
    end_datetime: str | None = None
    duration: str = ""  # "I" = Intraday, "M" = Multi-day
    notes: str = ""
    notes_excerpt: str = ""
    tags: list[str] = Field(default_factory=list)
    shared: bool = False
    initial_risk: float | None = None
    exec_count: int = 0
    comment_count: int = 0

    # MFE/MAE
    position_mfe: float | None = None
    position_mfe_datetime: str | None = None
    position_mae: float | None = None
    position_mae_datetime: str | None = None
    price_mfe: float | None = None
    price_mfe_datetime: str | None = None
    price_mae: float | None = None
    price_mae_datetime: str | None = None
    best_exit_pl: float | None = None
    best_exit_pl_datetime: str | None = None

    @field_validator("start_datetime", mode="before")
    @classmethod
    def _timestamp_as_text(cls, value: Any) -> Any:
        return value if isinstance(value, str) else str(value)

    @property
    def key(self) -> str:
        """Trade id as used for executions map keys."""
        return str(self.id)


class TradesPage(BaseModel):
    trades: list[Trade] = Field(default_factory=list)


class ExecutionsPage(BaseModel):
    executions: list[Execution] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Local archive
# ---------------------------------------------------------------------------

class DayBucket(BaseModel):
    """Trades whose start falls on one calendar date (reference timezone)."""

    date: date
    trades: list[Trade] = Field(default_factory=list)
    executions: dict[str, list[Execution]] | None = None


class DayArchive(BaseModel):
    """Persisted form of a DayBucket. One file per date."""

    date: date
    trades: list[Trade]
    executions: dict[str, list[Execution]] | None = None
    exported_at: datetime


class ProgressCursor(BaseModel):
    """Incremental export progress."""

    last_export_date: date | None = None
    first_trade_date: date | None = None
    total_trades: int = 0
    total_days: int = 0
    last_run_at: datetime | None = None


# ---------------------------------------------------------------------------
# Derived statistics
# ---------------------------------------------------------------------------

class SymbolSummary(BaseModel):
    """Trades of one symbol within a day."""

    symbol: str
    side: str  # L, S, or "L/S" if both
    gross_pl: float = 0.0
    volume: int = 0
    count: int = 0


class DailySummary(BaseModel):
    """Computed per-day statistics for display."""

    date: date
    trade_count: int = 0
    symbols: list[SymbolSummary] = Field(default_factory=list)
    gross_pl: float = 0.0
    net_pl: float = 0.0
    commission: float = 0.0
    fees: float = 0.0
    total_volume: int = 0
    winners: int = 0
    losers: int = 0
    win_rate: float = 0.0
