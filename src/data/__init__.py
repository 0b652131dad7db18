"""
Data pipeline: fetch OHLCV, normalize to UTC, persist bars, load history for replay.

Depends on trade_core.contracts for Bar; no dependency from trade_core back to data.
"""

from data.bar_store import BarStore
from data.fetcher import BarFetcher, DataSourceError, FetchResult
from data.history import load_history

__all__ = [
    "BarFetcher",
    "BarStore",
    "DataSourceError",
    "FetchResult",
    "load_history",
]


def get_alpaca_fetcher(api_key: str, api_secret: str):
    """Lazy import to avoid requiring alpaca-py when not used."""
    from data.alpaca_fetcher import AlpacaBarFetcher

    return AlpacaBarFetcher(api_key, api_secret)
