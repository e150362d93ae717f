"""Market data module."""

from .connector import MarketDataClient, BybitConnector

__all__ = [
    "MarketDataClient",
    "BybitConnector",
]
