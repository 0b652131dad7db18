"""
Backtest engine: replay bars through a strategy, dispatch signals, reconcile, summarize.
"""

from backtest.debug_export import write_debug_csv
from backtest.runner import BacktestResult, SymbolResult, replay_symbol, run_backtest

__all__ = ["BacktestResult", "SymbolResult", "replay_symbol", "run_backtest", "write_debug_csv"]
