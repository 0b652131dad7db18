"""Pytest fixtures: bar sequences and ledger helpers for deterministic tests."""

from datetime import datetime, timedelta, timezone

import pytest

from trade_core.contracts import Bar

BASE_TS = datetime(2024, 1, 2, 14, 30, tzinfo=timezone.utc)


def make_bar(day: float, close: float, symbol: str = "SPY", *, volume: int = 1_000_000, trades: int = 100) -> Bar:
    """Bar *day* days after BASE_TS; open/high/low bracket the close."""
    return Bar(
        open=close,
        high=close + 1.0,
        low=max(close - 1.0, 0.01),
        close=close,
        volume=volume,
        timestamp=BASE_TS + timedelta(days=day),
        symbol=symbol,
        trades=trades,
    )


def bars_from_closes(closes: list[float], symbol: str = "SPY") -> list[Bar]:
    """One daily bar per close, starting at BASE_TS."""
    return [make_bar(i, c, symbol) for i, c in enumerate(closes)]


@pytest.fixture
def symbol() -> str:
    return "SPY"


@pytest.fixture
def crossover_closes() -> list[float]:
    """With fast=2, slow=3: golden cross on bar 4 (close 11), death cross on bar 7 (close 9)."""
    return [10.0, 9.0, 8.0, 9.0, 11.0, 13.0, 12.0, 9.0, 7.0]
