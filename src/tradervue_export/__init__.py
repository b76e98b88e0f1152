"""Incremental Tradervue trade exporter and daily P&L summaries."""

__version__ = "0.1.0"
