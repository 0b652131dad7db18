"""Simple moving average crossover: long on golden cross, flat on death cross."""

from __future__ import annotations

from typing import Any, Iterable

from strategies.base import BaseStrategy, SymbolSeries
from trade_core.contracts import Signal


def sma(values: list[float], window: int) -> float | None:
    """Mean of the last *window* values, or None until enough history."""
    if window <= 0 or len(values) < window:
        return None
    return sum(values[-window:]) / window


class SmaCrossover(BaseStrategy):
    """Buy when the fast SMA crosses above the slow SMA, sell on the reverse cross.

    Params: ``fast`` (default 10), ``slow`` (default 30).
    """

    name = "sma_crossover"

    def __init__(self, symbols: Iterable[str], params: dict[str, Any] | None = None) -> None:
        super().__init__(symbols, params)
        self.fast = int(self.params.get("fast", 10))
        self.slow = int(self.params.get("slow", 30))
        if not 0 < self.fast < self.slow:
            raise ValueError(f"sma_crossover needs 0 < fast < slow, got fast={self.fast} slow={self.slow}")
        self._long: dict[str, bool] = {}

    def evaluate(self, symbol: str, series: SymbolSeries) -> Signal | None:
        fast = sma(series.close, self.fast)
        slow = sma(series.close, self.slow)
        series.record(f"sma{self.fast}", fast)
        series.record(f"sma{self.slow}", slow)

        prev_fast = series.indicators[f"sma{self.fast}"][-2] if len(series) > 1 else None
        prev_slow = series.indicators[f"sma{self.slow}"][-2] if len(series) > 1 else None
        if None in (fast, slow, prev_fast, prev_slow):
            return None

        bar = series.last_bar
        long = self._long.get(symbol, False)
        if not long and prev_fast <= prev_slow and fast > slow:
            self._long[symbol] = True
            return Signal(symbol=symbol, bar=bar, buy=True)
        if long and prev_fast >= prev_slow and fast < slow:
            self._long[symbol] = False
            return Signal(symbol=symbol, bar=bar, sell=True)
        return None
