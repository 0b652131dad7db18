"""
Pluggable strategies: bars in, at most one buy/sell Signal out per bar.

Strategies own their per-symbol indicator state. The replay driver reads
only their recorded close and timestamp series.
"""

from strategies.base import BaseStrategy, SymbolSeries
from strategies.registry import load_strategy
from strategies.sma_crossover import SmaCrossover

__all__ = ["BaseStrategy", "load_strategy", "SmaCrossover", "SymbolSeries"]
