"""
trade-core: trade lifecycle engine and performance summary.

No I/O. Consumes signals and bars, produces a trade ledger and a
PerformanceSummary. Fully deterministic and unit-testable.
"""

from trade_core.contracts import (
    Bar,
    PerformanceSummary,
    Signal,
    Trade,
    TradeStatus,
)
from trade_core.errors import DegenerateSummaryError, ProtocolViolation, TradeCoreError
from trade_core.ledger import SymbolState, TradeLedger, on_signal
from trade_core.reconciler import reconcile
from trade_core.summary import summarize

__all__ = [
    "Bar",
    "DegenerateSummaryError",
    "on_signal",
    "PerformanceSummary",
    "ProtocolViolation",
    "reconcile",
    "Signal",
    "summarize",
    "SymbolState",
    "Trade",
    "TradeCoreError",
    "TradeLedger",
    "TradeStatus",
]
