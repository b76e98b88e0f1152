"""Daily summaries computed from exported day archives.

Pure read-only: only the files under ``<data_dir>/trades`` are consulted,
never the network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from tradervue_export.core.models import DailySummary, SymbolSummary, Trade
from tradervue_export.export.archive import ArchiveStore


class SummaryGenerator:
    """Reads exported day files and produces :class:`DailySummary` rows."""

    def __init__(self, data_dir: str | Path) -> None:
        self._archives = ArchiveStore(data_dir)

    def generate(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[DailySummary]:
        """Summaries for archived dates in the inclusive range, by date."""
        return [
            build_daily_summary(archive.date, archive.trades)
            for archive in self._archives.iter_archives(from_date, to_date)
        ]


@dataclass
class _SymbolAgg:
    sides: set[str] = field(default_factory=set)
    gross_pl: float = 0.0
    volume: int = 0
    count: int = 0


def build_daily_summary(day: date, trades: list[Trade]) -> DailySummary:
    """Aggregate one day's trades.

    A trade with ``gross_pl > 0`` is a winner; anything else (including a
    scratch at exactly zero) counts as a loser.
    """
    s = DailySummary(date=day, trade_count=len(trades))
    symbols: dict[str, _SymbolAgg] = {}

    for t in trades:
        s.gross_pl += t.gross_pl
        s.commission += t.commission
        s.fees += t.fees
        s.total_volume += t.volume
        if t.gross_pl > 0:
            s.winners += 1
        else:
            s.losers += 1

        agg = symbols.setdefault(t.symbol, _SymbolAgg())
        agg.sides.add(t.side)
        agg.gross_pl += t.gross_pl
        agg.volume += t.volume
        agg.count += 1

    s.net_pl = s.gross_pl - s.commission - s.fees
    if s.winners + s.losers > 0:
        s.win_rate = s.winners / (s.winners + s.losers) * 100

    s.symbols = [
        SymbolSummary(
            symbol=sym,
            side=_side_label(agg.sides),
            gross_pl=agg.gross_pl,
            volume=agg.volume,
            count=agg.count,
        )
        for sym, agg in symbols.items()
    ]
    return s


def _side_label(sides: set[str]) -> str:
    if "L" in sides and "S" in sides:
        return "L/S"
    if "S" in sides:
        return "S"
    return "L"
