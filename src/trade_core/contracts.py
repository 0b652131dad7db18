"""
Data contracts for trade-core: Bar, Signal, Trade, PerformanceSummary.

Bars come from the data source, signals from the strategy. Trades are
frozen; a state transition returns a new Trade. No I/O.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from trade_core.errors import ProtocolViolation


@dataclass(frozen=True)
class Bar:
    """One OHLCV sampling interval for one symbol; timestamps in UTC."""

    open: float
    high: float
    low: float
    close: float
    volume: int
    timestamp: datetime
    symbol: str
    trades: int = 0
    bar_index: int | None = None


@dataclass(frozen=True)
class Signal:
    """Buy or sell event emitted by a strategy for one bar. Never both."""

    symbol: str
    bar: Bar
    buy: bool = False
    sell: bool = False

    def __post_init__(self) -> None:
        if self.buy and self.sell:
            raise ProtocolViolation(self.symbol, self.bar.timestamp, "signal has both buy and sell set")

    @property
    def side(self) -> str | None:
        if self.buy:
            return "buy"
        if self.sell:
            return "sell"
        return None


class TradeStatus(str, Enum):
    """Lifecycle state of a trade. CLOSED and ASSUMED_CLOSED are terminal."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    ASSUMED_CLOSED = "ASSUMED_CLOSED"


@dataclass(frozen=True)
class BuyLeg:
    timestamp: datetime
    price: float
    qty: int
    cost: float


@dataclass(frozen=True)
class SellLeg:
    timestamp: datetime | None = None
    price: float | None = None
    revenue: float | None = None


@dataclass(frozen=True)
class Profit:
    amt: float | None = None
    pct: float | None = None  # None while open, or when cost is zero


@dataclass(frozen=True)
class TradeStats:
    time_held: float | None = None  # minutes


@dataclass(frozen=True)
class Trade:
    """One round trip: opened on a buy, closed on a sell or at end of data."""

    symbol: str
    buy: BuyLeg
    sell: SellLeg = field(default_factory=SellLeg)
    profit: Profit = field(default_factory=Profit)
    stats: TradeStats = field(default_factory=TradeStats)
    status: TradeStatus = TradeStatus.OPEN

    @property
    def is_open(self) -> bool:
        return self.status == TradeStatus.OPEN

    @property
    def assumed_closed(self) -> bool:
        return self.status == TradeStatus.ASSUMED_CLOSED

    @property
    def is_win(self) -> bool:
        """Unknown or non-negative profit counts as a win."""
        return self.profit.amt is None or self.profit.amt >= 0

    def closed(self, sell: SellLeg, profit: Profit, stats: TradeStats, status: TradeStatus) -> "Trade":
        return replace(self, sell=sell, profit=profit, stats=stats, status=status)


@dataclass(frozen=True)
class PerformanceSummary:
    """Aggregate performance over one symbol's reconciled trades.

    Full precision; rounding happens in the output layer. Fields typed
    ``float | None`` are None when undefined (no winners, no losers, or
    zero elapsed days between the first and last buy).
    """

    symbol: str
    trade_count: int
    total_profit_amt: float
    total_profit_pct: float
    win_count: int
    loss_count: int
    win_pct: float
    loss_pct: float
    avg_win_amt: float | None
    avg_loss_amt: float | None
    avg_win_pct: float | None
    avg_loss_pct: float | None
    avg_time_held_minutes: float
    avg_trades_per_day: float | None
    buy_hold_qty: float
    buy_hold_amt: float
    buy_hold_pct: float
