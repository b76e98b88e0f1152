"""Table and CSV rendering of daily summaries."""

from __future__ import annotations

import csv
from typing import TextIO

from tradervue_export.core.models import DailySummary, SymbolSummary
from tradervue_export.core.timeutil import to_file_date

_TABLE_HEADER = ["DATE", "TRADES", "GROSS P&L", "NET P&L", "WIN%", "VOLUME", "SYMBOLS"]

_CSV_COLUMNS = [
    "date",
    "trades",
    "gross_pl",
    "net_pl",
    "commission",
    "fees",
    "win_rate",
    "winners",
    "losers",
    "volume",
    "symbols",
]


def format_pl(value: float) -> str:
    """Signed dollar amount: ``+$12.50`` / ``-$3.00``."""
    if value >= 0:
        return f"+${value:.2f}"
    return f"-${-value:.2f}"


def _symbols_cell(symbols: list[SymbolSummary]) -> str:
    return " ".join(f"{s.symbol}({s.side}){format_pl(s.gross_pl)}" for s in symbols)


def _symbols_csv(symbols: list[SymbolSummary]) -> str:
    return " ".join(f"{s.symbol}({s.side})" for s in symbols)


def render_table(summaries: list[DailySummary]) -> str:
    """Aligned text table with a TOTAL row."""
    rows: list[list[str]] = [_TABLE_HEADER, ["─" * len(h) for h in _TABLE_HEADER]]

    tot_gross = tot_net = 0.0
    tot_trades = tot_vol = tot_win = tot_loss = 0
    for s in summaries:
        rows.append([
            to_file_date(s.date),
            str(s.trade_count),
            format_pl(s.gross_pl),
            format_pl(s.net_pl),
            f"{s.win_rate:.0f}%",
            str(s.total_volume),
            _symbols_cell(s.symbols),
        ])
        tot_gross += s.gross_pl
        tot_net += s.net_pl
        tot_trades += s.trade_count
        tot_vol += s.total_volume
        tot_win += s.winners
        tot_loss += s.losers

    win_rate = tot_win / (tot_win + tot_loss) * 100 if tot_win + tot_loss else 0.0
    rows.append(["─" * len(h) for h in _TABLE_HEADER])
    rows.append([
        "TOTAL",
        str(tot_trades),
        format_pl(tot_gross),
        format_pl(tot_net),
        f"{win_rate:.0f}%",
        str(tot_vol),
        f"{len(summaries)} days",
    ])

    widths = [max(len(r[i]) for r in rows) for i in range(len(_TABLE_HEADER))]
    lines = []
    for r in rows:
        cells = [cell.ljust(widths[i]) for i, cell in enumerate(r[:-1])]
        cells.append(r[-1])
        lines.append("  ".join(cells))
    return "\n".join(lines) + "\n"


def write_csv(out: TextIO, summaries: list[DailySummary]) -> None:
    """Write summaries as CSV with a header row."""
    writer = csv.writer(out)
    writer.writerow(_CSV_COLUMNS)
    for s in summaries:
        writer.writerow([
            to_file_date(s.date),
            s.trade_count,
            f"{s.gross_pl:.2f}",
            f"{s.net_pl:.2f}",
            f"{s.commission:.2f}",
            f"{s.fees:.2f}",
            f"{s.win_rate:.1f}",
            s.winners,
            s.losers,
            s.total_volume,
            _symbols_csv(s.symbols),
        ])
