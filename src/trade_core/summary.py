"""
Performance summary over a symbol's reconciled trades.

Each figure is a plain reduction over the trade sequence. Averages whose
denominator is zero come back as None instead of NaN or infinity; the
rest of the summary is still computed.

Win policy: a trade wins when its profit is unknown or >= 0 (a trade
that breaks exactly even counts as a win). Losers have profit < 0.
"""

from __future__ import annotations

import math
from typing import Sequence

from trade_core.contracts import PerformanceSummary, Trade
from trade_core.errors import DegenerateSummaryError
from trade_core.ledger import TradeLedger

MINUTES_PER_DAY = 60 * 24


def floor2(value: float) -> float:
    """Floor to 2 decimal places."""
    # round first so 0.29 * 100 = 28.999... still floors to 29
    return math.floor(round(value * 100, 6)) / 100


def _safe_div(numerator: float, denominator: float) -> float | None:
    if denominator == 0:
        return None
    return numerator / denominator


def _sum_amt(trades: Sequence[Trade]) -> float:
    return sum(t.profit.amt for t in trades if t.profit.amt is not None)


def _sum_pct(trades: Sequence[Trade]) -> float:
    return sum(t.profit.pct for t in trades if t.profit.pct is not None)


def summarize(ledger: TradeLedger, closes: Sequence[float], capital: float) -> PerformanceSummary:
    """Compute the PerformanceSummary for one symbol.

    Parameters
    ----------
    ledger:
        Non-empty, fully reconciled ledger (no open trades).
    closes:
        The symbol's full close-price series, oldest first. Only the first
        and last elements are used, for the buy-and-hold benchmark.
    capital:
        Configured starting capital.

    Raises
    ------
    DegenerateSummaryError
        If the ledger is empty or still has an open trade, or there are
        no closes to benchmark against.
    """
    trades = list(ledger)
    if not trades:
        raise DegenerateSummaryError("cannot summarize a ledger with no trades")
    symbol = trades[0].symbol
    if any(t.is_open for t in trades):
        raise DegenerateSummaryError(f"{symbol}: ledger has an open trade; reconcile before summarizing")
    if not closes:
        raise DegenerateSummaryError(f"{symbol}: no close prices for buy & hold benchmark")

    n = len(trades)
    winners = [t for t in trades if t.is_win]
    losers = [t for t in trades if not t.is_win]
    win_count = len(winners)
    loss_count = n - win_count

    win_pct = win_count / n * 100
    total_held = sum(t.stats.time_held for t in trades if t.stats.time_held is not None)

    elapsed = trades[-1].buy.timestamp - trades[0].buy.timestamp
    num_days = elapsed.total_seconds() / 60 / MINUTES_PER_DAY

    first_close = closes[0]
    last_close = closes[-1]
    buy_hold_qty = floor2(capital / first_close)

    return PerformanceSummary(
        symbol=symbol,
        trade_count=n,
        total_profit_amt=_sum_amt(trades),
        total_profit_pct=_sum_pct(trades),
        win_count=win_count,
        loss_count=loss_count,
        win_pct=win_pct,
        loss_pct=100 - win_pct,
        avg_win_amt=_safe_div(_sum_amt(winners), win_count),
        avg_loss_amt=_safe_div(_sum_amt(losers), loss_count),
        avg_win_pct=_safe_div(_sum_pct(winners), win_count),
        avg_loss_pct=_safe_div(_sum_pct(losers), loss_count),
        avg_time_held_minutes=total_held / n,
        avg_trades_per_day=_safe_div(n, num_days),
        buy_hold_qty=buy_hold_qty,
        buy_hold_amt=(last_close - first_close) * buy_hold_qty,
        buy_hold_pct=(last_close - first_close) / first_close,
    )
