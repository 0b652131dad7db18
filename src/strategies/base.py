"""Base strategy: records each symbol's bar series and asks the subclass for signals."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

from trade_core.contracts import Bar, Signal


@dataclass
class SymbolSeries:
    """Column-wise bar history for one symbol, plus named indicator series."""

    symbol: str
    times: list[datetime] = field(default_factory=list)
    open: list[float] = field(default_factory=list)
    high: list[float] = field(default_factory=list)
    low: list[float] = field(default_factory=list)
    close: list[float] = field(default_factory=list)
    volume: list[int] = field(default_factory=list)
    trades: list[int] = field(default_factory=list)
    indicators: dict[str, list[float | None]] = field(default_factory=dict)
    last_bar: Bar | None = None

    def append(self, bar: Bar) -> None:
        self.times.append(bar.timestamp)
        self.open.append(bar.open)
        self.high.append(bar.high)
        self.low.append(bar.low)
        self.close.append(bar.close)
        self.volume.append(bar.volume)
        self.trades.append(bar.trades)
        self.last_bar = bar

    def record(self, name: str, value: float | None) -> None:
        """Append an indicator value for the latest bar."""
        values = self.indicators.setdefault(name, [])
        values.extend([None] * (len(self.times) - 1 - len(values)))
        values.append(value)

    def __len__(self) -> int:
        return len(self.times)


class BaseStrategy:
    """Minimal strategy contract for the replay driver.

    Subclasses implement ``evaluate``; ``add_bar`` is what the driver calls.
    """

    name = "base"

    def __init__(self, symbols: Iterable[str], params: dict[str, Any] | None = None) -> None:
        self.params: dict[str, Any] = dict(params or {})
        self.symbols: dict[str, SymbolSeries] = {s: SymbolSeries(s) for s in symbols}

    def series(self, symbol: str) -> SymbolSeries:
        if symbol not in self.symbols:
            self.symbols[symbol] = SymbolSeries(symbol)
        return self.symbols[symbol]

    def add_bar(self, symbol: str, bar: Bar) -> Signal | None:
        """Record *bar* for *symbol* and return the strategy's signal, if any."""
        series = self.series(symbol)
        series.append(bar)
        return self.evaluate(symbol, series)

    def evaluate(self, symbol: str, series: SymbolSeries) -> Signal | None:
        raise NotImplementedError

    def closes(self, symbol: str) -> list[float]:
        return list(self.series(symbol).close)

    def times(self, symbol: str) -> list[datetime]:
        return list(self.series(symbol).times)

    def last_bar(self, symbol: str) -> Bar | None:
        return self.series(symbol).last_bar
