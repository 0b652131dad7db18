"""
Position reconciler: force-close a trade still open at end of data.

Runs once per symbol after its bar stream is exhausted and before the
summary. The close uses the last bar the strategy saw and is marked
ASSUMED_CLOSED so output can tell it apart from a real sell.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from trade_core.contracts import Bar, TradeStatus
from trade_core.ledger import SymbolState, close_trade

logger = logging.getLogger("barreplay.reconciler")


def reconcile(state: SymbolState, last_bar: Bar | None) -> SymbolState:
    """Return *state* with its open trade (if any) closed at *last_bar*.

    No-op for an empty ledger or one whose last trade is already closed.
    """
    ledger = state.ledger
    if not ledger.has_open:
        return state
    if last_bar is None:
        raise ValueError(f"{state.symbol}: open trade but no last bar to close it against")
    trade = close_trade(ledger.current, last_bar, TradeStatus.ASSUMED_CLOSED)
    logger.info(
        "%s: open trade assumed closed at %.2f (%s)",
        state.symbol, last_bar.close, last_bar.timestamp.isoformat(),
    )
    return replace(state, ledger=ledger.replace_current(trade))
