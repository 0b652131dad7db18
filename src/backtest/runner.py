"""
Replay driver: for each symbol, feed bars in order to the strategy and its
signals to the ledger, then reconcile and summarize.

Single-threaded. Symbols are replayed one after another; each carries its
own SymbolState and shares only the read-only capital with the others.
A ProtocolViolation or DegenerateSummaryError fails that symbol alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence

from strategies.base import BaseStrategy
from trade_core.contracts import Bar, PerformanceSummary, TradeStatus
from trade_core.errors import DegenerateSummaryError, ProtocolViolation
from trade_core.ledger import SymbolState, TradeLedger, on_signal
from trade_core.reconciler import reconcile
from trade_core.summary import summarize

logger = logging.getLogger("barreplay.runner")

JournalCallback = Callable[[str, dict], None]


@dataclass
class SymbolResult:
    """Outcome of replaying one symbol."""

    symbol: str
    ledger: TradeLedger = TradeLedger()
    summary: PerformanceSummary | None = None
    error: str | None = None
    bar_count: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BacktestResult:
    """Result of a backtest run, keyed by symbol in replay order."""

    capital: float
    results: dict[str, SymbolResult] = field(default_factory=dict)

    @property
    def summaries(self) -> dict[str, PerformanceSummary]:
        return {s: r.summary for s, r in self.results.items() if r.summary is not None}

    @property
    def failed(self) -> dict[str, str]:
        return {s: r.error for s, r in self.results.items() if r.error is not None}


def replay_symbol(
    bars: Sequence[Bar],
    strategy: BaseStrategy,
    symbol: str,
    *,
    capital: float,
    journal_callback: JournalCallback | None = None,
) -> SymbolResult:
    """Replay one symbol's bars. Bars must already be in non-decreasing time order.

    Parameters
    ----------
    bars:
        Chronological bar history for *symbol*.
    strategy:
        Strategy instance; its per-symbol series supplies the last bar and
        the close series for the buy & hold benchmark.
    capital:
        Capital used to size every trade (not compounded).
    journal_callback:
        Optional callback receiving ``(event_type, payload)`` for
        ``signal``, ``exit``, ``assumed_exit``, ``summary`` and ``error``.
    """
    state = SymbolState(symbol=symbol, capital=capital)
    result = SymbolResult(symbol=symbol, bar_count=len(bars))

    try:
        for bar in bars:
            signal = strategy.add_bar(symbol, bar)
            if signal is None or signal.side is None:
                continue
            state = on_signal(state, signal)
            if journal_callback:
                journal_callback("signal", {"signal": signal, "trade": state.ledger.current})
                if signal.sell:
                    journal_callback("exit", {"trade": state.ledger.current})

        state = reconcile(state, strategy.last_bar(symbol))
        result.ledger = state.ledger
        current = state.ledger.current
        if current is not None and current.status == TradeStatus.ASSUMED_CLOSED and journal_callback:
            journal_callback("assumed_exit", {"trade": current})

        if not state.ledger:
            logger.info("%s: no signals over %d bars, no summary", symbol, len(bars))
            return result

        result.summary = summarize(state.ledger, strategy.closes(symbol), capital)
        if journal_callback:
            journal_callback("summary", {"summary": result.summary})
    except (ProtocolViolation, DegenerateSummaryError) as exc:
        result.ledger = state.ledger
        result.error = f"{type(exc).__name__}: {exc}"
        logger.error("%s: replay failed: %s", symbol, exc)
        if journal_callback:
            journal_callback("error", {"symbol": symbol, "message": result.error})
    return result


def run_backtest(
    history: Mapping[str, Sequence[Bar]],
    strategy: BaseStrategy,
    *,
    capital: float = 1000.0,
    journal_callback: JournalCallback | None = None,
) -> BacktestResult:
    """Replay every symbol in *history* through *strategy*, one symbol at a time."""
    run = BacktestResult(capital=capital)
    for symbol, bars in history.items():
        logger.info("Replaying %s: %d bars", symbol, len(bars))
        run.results[symbol] = replay_symbol(
            bars, strategy, symbol, capital=capital, journal_callback=journal_callback,
        )
    return run
