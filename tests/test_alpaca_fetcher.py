"""Tests for Alpaca bar fetcher (mocked SDK). No network calls."""

import sys
from datetime import datetime, timezone
from types import ModuleType
from unittest.mock import MagicMock, patch

import pytest

from data.fetcher import DataSourceError


@pytest.fixture(autouse=True)
def _mock_alpaca_modules():
    """Mock the alpaca SDK modules so tests run without alpaca-py installed."""
    alpaca = ModuleType("alpaca")
    alpaca_data = ModuleType("alpaca.data")
    alpaca_data_historical = ModuleType("alpaca.data.historical")
    alpaca_data_requests = ModuleType("alpaca.data.requests")
    alpaca_data_timeframe = ModuleType("alpaca.data.timeframe")
    alpaca_data_enums = ModuleType("alpaca.data.enums")

    alpaca_data_historical.StockHistoricalDataClient = MagicMock()
    alpaca_data_requests.StockBarsRequest = MagicMock()
    alpaca_data_enums.DataFeed = MagicMock()

    class FakeTimeFrameUnit:
        Minute = "Minute"
        Hour = "Hour"
        Day = "Day"

    alpaca_data_timeframe.TimeFrameUnit = FakeTimeFrameUnit
    alpaca_data_timeframe.TimeFrame = MagicMock()

    mods = {
        "alpaca": alpaca,
        "alpaca.data": alpaca_data,
        "alpaca.data.historical": alpaca_data_historical,
        "alpaca.data.requests": alpaca_data_requests,
        "alpaca.data.timeframe": alpaca_data_timeframe,
        "alpaca.data.enums": alpaca_data_enums,
    }
    with patch.dict(sys.modules, mods):
        sys.modules.pop("data.alpaca_fetcher", None)
        yield alpaca_data_timeframe


def _alpaca_bar(ts: datetime, close: float = 100.5, trade_count=250) -> MagicMock:
    bar = MagicMock()
    bar.open = 100.0
    bar.high = 101.0
    bar.low = 99.0
    bar.close = close
    bar.volume = 1_000_000
    bar.trade_count = trade_count
    bar.timestamp = ts
    return bar


def _fetcher_returning(data: dict, next_page_token=None):
    from data.alpaca_fetcher import AlpacaBarFetcher

    response = MagicMock()
    response.data = data
    response.next_page_token = next_page_token
    fetcher = AlpacaBarFetcher("key", "secret")
    fetcher._client = MagicMock()
    fetcher._client.get_stock_bars.return_value = response
    return fetcher


def test_alpaca_fetcher_maps_bars() -> None:
    """Alpaca bars become trade_core Bars with trade count and UTC time."""
    ts = datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)
    fetcher = _fetcher_returning({"SPY": [_alpaca_bar(ts)]})

    result = fetcher.fetch("SPY", "1d", start=datetime(2024, 1, 1, tzinfo=timezone.utc))

    assert len(result.bars) == 1
    bar = result.bars[0]
    assert bar.symbol == "SPY"
    assert bar.open == 100.0
    assert bar.high == 101.0
    assert bar.close == 100.5
    assert bar.volume == 1_000_000
    assert bar.trades == 250
    assert bar.bar_index == 0
    assert bar.timestamp == ts
    assert result.timeframe == "1d"
    assert result.next_cursor is None


def test_alpaca_fetcher_naive_timestamp_is_utc() -> None:
    fetcher = _fetcher_returning({"SPY": [_alpaca_bar(datetime(2024, 1, 15, 14, 30), trade_count=None)]})
    bar = fetcher.fetch("SPY", "1d").bars[0]
    assert bar.timestamp.tzinfo == timezone.utc
    assert bar.trades == 0


def test_alpaca_fetcher_passes_page_token() -> None:
    fetcher = _fetcher_returning({"SPY": []}, next_page_token="abc")
    result = fetcher.fetch("SPY", "1h")
    assert result.bars == []
    assert result.next_cursor == "abc"


def test_alpaca_fetcher_empty_response() -> None:
    fetcher = _fetcher_returning({"SPY": []})
    result = fetcher.fetch("SPY", "15m")
    assert len(result.bars) == 0


def test_alpaca_fetcher_unsupported_timeframe() -> None:
    fetcher = _fetcher_returning({"SPY": []})
    with pytest.raises(ValueError, match="Unsupported timeframe"):
        fetcher.fetch("SPY", "2w")


def test_alpaca_fetcher_request_failure_is_data_source_error() -> None:
    fetcher = _fetcher_returning({})
    fetcher._client.get_stock_bars.side_effect = RuntimeError("403 forbidden")
    with pytest.raises(DataSourceError, match="SPY 1d"):
        fetcher.fetch("SPY", "1d")


def test_alpaca_fetcher_requires_keys() -> None:
    from data.alpaca_fetcher import AlpacaBarFetcher

    with pytest.raises(ValueError, match="API key"):
        AlpacaBarFetcher("", "")
