"""
Trade ledger and signal dispatcher.

A ledger is an append-ordered tuple of trades; the current trade is the
last one. At most one trade is open at a time. Each transition returns a
new ledger, so a SymbolState can be passed to and returned from every
replay step without shared mutable state.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

from trade_core.contracts import (
    Bar,
    BuyLeg,
    Profit,
    SellLeg,
    Signal,
    Trade,
    TradeStats,
    TradeStatus,
)
from trade_core.errors import ProtocolViolation

logger = logging.getLogger("barreplay.ledger")


@dataclass(frozen=True)
class TradeLedger:
    """Append-ordered trades for one symbol."""

    trades: tuple[Trade, ...] = ()

    def __len__(self) -> int:
        return len(self.trades)

    def __iter__(self):
        return iter(self.trades)

    @property
    def current(self) -> Trade | None:
        return self.trades[-1] if self.trades else None

    @property
    def has_open(self) -> bool:
        current = self.current
        return current is not None and current.is_open

    def append(self, trade: Trade) -> TradeLedger:
        return TradeLedger(self.trades + (trade,))

    def replace_current(self, trade: Trade) -> TradeLedger:
        if not self.trades:
            raise IndexError("ledger is empty")
        return TradeLedger(self.trades[:-1] + (trade,))


@dataclass(frozen=True)
class SymbolState:
    """Per-symbol working state for one backtest run.

    Capital is the same configured amount for every trade; it is not
    compounded between trades.
    """

    symbol: str
    capital: float
    ledger: TradeLedger = TradeLedger()


def open_trade(bar: Bar, capital: float) -> Trade:
    """Open a trade at the bar's close, sized as floor(capital / close)."""
    if bar.close <= 0:
        raise ProtocolViolation(bar.symbol, bar.timestamp, f"cannot buy at non-positive close {bar.close}")
    qty = max(int(math.floor(capital / bar.close)), 0)
    cost = round(bar.close * qty, 2)
    return Trade(
        symbol=bar.symbol,
        buy=BuyLeg(timestamp=bar.timestamp, price=bar.close, qty=qty, cost=cost),
    )


def close_trade(trade: Trade, bar: Bar, status: TradeStatus = TradeStatus.CLOSED) -> Trade:
    """Close an open trade at the bar's close. Used by sells and the reconciler."""
    if not trade.is_open:
        raise ProtocolViolation(trade.symbol, bar.timestamp, f"trade is already {trade.status.value}")
    revenue = bar.close * trade.buy.qty
    amt = revenue - trade.buy.cost
    pct = (amt / trade.buy.cost * 100) if trade.buy.cost else None
    held = (bar.timestamp - trade.buy.timestamp).total_seconds() / 60
    return trade.closed(
        sell=SellLeg(timestamp=bar.timestamp, price=bar.close, revenue=revenue),
        profit=Profit(amt=amt, pct=pct),
        stats=TradeStats(time_held=held),
        status=status,
    )


def on_signal(state: SymbolState, signal: Signal) -> SymbolState:
    """Apply one signal to the symbol's ledger and return the new state.

    Buy opens a trade; sell closes the current one. A buy while a trade
    is open, or a sell with none open, raises ProtocolViolation.
    """
    bar = signal.bar
    ledger = state.ledger
    if signal.buy:
        if ledger.has_open:
            raise ProtocolViolation(state.symbol, bar.timestamp, "buy signal while a trade is already open")
        trade = open_trade(bar, state.capital)
        if trade.buy.qty == 0:
            logger.warning(
                "%s: capital %.2f below close %.2f at %s, recording zero-quantity trade",
                state.symbol, state.capital, bar.close, bar.timestamp.isoformat(),
            )
        logger.debug("%s BUY %d @ %.2f (%s)", state.symbol, trade.buy.qty, bar.close, bar.timestamp.isoformat())
        return replace(state, ledger=ledger.append(trade))
    if signal.sell:
        if not ledger.has_open:
            raise ProtocolViolation(state.symbol, bar.timestamp, "sell signal with no open trade")
        trade = close_trade(ledger.current, bar)
        logger.debug("%s SELL @ %.2f P/L %.2f (%s)", state.symbol, bar.close, trade.profit.amt, bar.timestamp.isoformat())
        return replace(state, ledger=ledger.replace_current(trade))
    return state
