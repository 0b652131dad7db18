"""Typed errors raised by trade-core."""

from __future__ import annotations

from datetime import datetime


class TradeCoreError(Exception):
    """Base class for trade-core errors."""


class ProtocolViolation(TradeCoreError):
    """A signal arrived that the ledger cannot accept.

    Raised for a sell with no open trade, a buy while a trade is already
    open, or a buy on a non-positive close. Fails the instrument's replay.
    """

    def __init__(self, symbol: str, timestamp: datetime | None, reason: str) -> None:
        self.symbol = symbol
        self.timestamp = timestamp
        self.reason = reason
        when = timestamp.isoformat() if timestamp is not None else "?"
        super().__init__(f"{symbol} @ {when}: {reason}")


class DegenerateSummaryError(TradeCoreError):
    """Summary requested on a ledger with no trades (or an unreconciled one)."""
