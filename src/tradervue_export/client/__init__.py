"""Tradervue REST client: rate-limited transport and typed endpoints."""

from .api import MAX_PER_PAGE, TradeSource, TradervueClient
from .transport import RateLimitedTransport

__all__ = [
    "MAX_PER_PAGE",
    "RateLimitedTransport",
    "TradeSource",
    "TradervueClient",
]
