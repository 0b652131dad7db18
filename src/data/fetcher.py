"""
Fetch OHLCV bars from a data source. Configurable adapter; sync.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from trade_core.contracts import Bar


class DataSourceError(Exception):
    """Bar retrieval failed. Fatal for the whole run."""


@dataclass
class FetchResult:
    """Result of a fetch: bars and optional next cursor for pagination."""

    bars: list[Bar]
    symbol: str
    timeframe: str
    next_cursor: str | None = None


class BarFetcher(Protocol):
    """Protocol for bar fetchers. Implement per provider (Alpaca, etc.)."""

    def fetch(
        self,
        symbol: str,
        timeframe: str,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> FetchResult:
        """Fetch bars; normalize timestamps to UTC. Returns FetchResult."""
        ...
