"""Read-only daily summaries over the exported archive."""

from .generator import SummaryGenerator, build_daily_summary
from .render import render_table, write_csv

__all__ = ["SummaryGenerator", "build_daily_summary", "render_table", "write_csv"]
