"""
Load every symbol's bars into memory before replay.

Retrieval is all-or-nothing: any store failure aborts the run with
DataSourceError so no symbol is replayed on partial data.
"""

import logging
import sqlite3
from datetime import datetime
from typing import Iterable

from trade_core.contracts import Bar

from data.bar_store import BarStore
from data.fetcher import DataSourceError

logger = logging.getLogger("barreplay.data")


def load_history(
    store: BarStore,
    symbols: Iterable[str],
    timeframe: str,
    *,
    begin: datetime | None = None,
    end: datetime | None = None,
) -> dict[str, list[Bar]]:
    """Return ``{symbol: bars}`` in ascending time order, bounded by [begin, end]."""
    history: dict[str, list[Bar]] = {}
    for symbol in symbols:
        try:
            bars = store.get_bars(symbol, timeframe, since=begin, until=end)
        except sqlite3.Error as exc:
            raise DataSourceError(f"Failed to load {symbol} {timeframe} bars: {exc}") from exc
        logger.info("Loaded %d %s bars for %s", len(bars), timeframe, symbol)
        history[symbol] = bars
    return history
