"""Tests for CLI commands using click CliRunner. No network; uses fixture data."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from cli.main import cli
from conftest import bars_from_closes
from data.bar_store import BarStore
from data.fetcher import FetchResult


def _write_config(tmp_path: Path, strategy: str | None, extra: str = "") -> Path:
    config_path = tmp_path / "config.yaml"
    strategy_line = f'strategy: "{strategy}"\n' if strategy else ""
    config_path.write_text(
        f"""{strategy_line}timeframe: "1d"
data:
  source: alpaca
  bar_store_path: "{tmp_path / 'bars.db'}"
backtest:
  capital: 1000
output:
  dir: "{tmp_path / 'output'}"
journal:
  path: "{tmp_path / 'journal.jsonl'}"
  echo_stdout: false
{extra}"""
    )
    return config_path


@pytest.fixture
def strategy_file(tmp_path: Path) -> Path:
    path = tmp_path / "sma.yaml"
    path.write_text("name: sma_crossover\nsymbols: [SPY, QQQ]\nparams:\n  fast: 2\n  slow: 3\n")
    return path


@pytest.fixture
def tmp_config(tmp_path: Path, strategy_file: Path, crossover_closes: list[float]) -> Path:
    """Config + strategy file + a BarStore holding SPY bars (QQQ has none)."""
    config_path = _write_config(tmp_path, str(strategy_file))
    store = BarStore(tmp_path / "bars.db")
    store.write_bars("SPY", "1d", bars_from_closes(crossover_closes))
    return config_path


def _journal(tmp_path: Path) -> list[dict]:
    return [json.loads(line) for line in (tmp_path / "journal.jsonl").read_text().splitlines()]


# ---------------------------------------------------------------------------
# backtest
# ---------------------------------------------------------------------------


def test_cli_backtest(tmp_config: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_config), "backtest"])
    assert result.exit_code == 0, result.output
    assert "=== SPY ===" in result.output
    assert "Total Profit (Loss)" in result.output
    assert "$-180.00" in result.output
    assert "[BUY]" not in result.output
    assert "No trades over 0 bars" in result.output


def test_cli_backtest_verbose(tmp_config: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_config), "backtest", "-v"])
    assert result.exit_code == 0, result.output
    assert "[BUY]" in result.output
    assert "[SELL]" in result.output


def test_cli_backtest_writes_journal(tmp_config: Path, tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_config), "backtest", "-c", "2000"])
    assert result.exit_code == 0, result.output
    events = _journal(tmp_path)
    assert [e["event"] for e in events] == ["signal", "signal", "trade", "summary"]
    trade = events[2]["trade"]
    assert trade["buy"]["qty"] == 181
    assert trade["status"] == "CLOSED"


def test_cli_backtest_begin_bound(tmp_config: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_config), "backtest", "-b", "2024-01-07"])
    assert result.exit_code == 0, result.output
    assert "No trades over 4 bars" in result.output


def test_cli_backtest_tofile(tmp_config: Path, tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_config), "backtest", "-o"])
    assert result.exit_code == 0, result.output
    report = tmp_path / "output" / "backtest_SPY.txt"
    assert report.exists()
    assert "Total Profit (Loss)" in report.read_text(encoding="utf-8")
    assert (tmp_path / "output" / "backtest_QQQ.txt").exists()
    assert "Total Profit (Loss)" not in result.output


def test_cli_backtest_debug(tmp_config: Path, tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_config), "backtest", "-d"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "output" / "debug_SPY.csv").exists()
    assert not (tmp_path / "output" / "debug_QQQ.csv").exists()


def test_cli_backtest_strategy_flag(tmp_path: Path, strategy_file: Path) -> None:
    config_path = _write_config(tmp_path, None)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_path), "backtest", "-s", str(strategy_file)])
    assert result.exit_code == 0, result.output
    assert "=== SPY ===" in result.output


def test_cli_backtest_requires_strategy(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, None)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_path), "backtest"])
    assert result.exit_code == 1
    assert "[!] ERROR" in result.output
    assert "-s flag" in result.output


def test_cli_backtest_rejects_bad_capital(tmp_config: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_config), "backtest", "-c", "0"])
    assert result.exit_code == 1
    assert "capital must be > 0" in result.output


def test_cli_backtest_missing_config(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_path / "nope.yaml"), "backtest"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


# ---------------------------------------------------------------------------
# ingest
# ---------------------------------------------------------------------------


class _FakeFetcher:
    def __init__(self, closes: list[float]) -> None:
        self.calls: list[str] = []
        self._closes = closes

    def fetch(self, symbol, timeframe, *, start=None, end=None, limit=None, cursor=None):
        self.calls.append(symbol)
        bars = bars_from_closes(self._closes, symbol) if symbol == "SPY" else []
        return FetchResult(bars=bars, symbol=symbol, timeframe=timeframe)


def test_cli_ingest(tmp_config: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeFetcher([1.0, 2.0, 3.0])
    monkeypatch.setattr("data.get_alpaca_fetcher", lambda key, secret: fake)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_config), "ingest", "--start", "2024-01-01", "--end", "2024-02-01"])
    assert result.exit_code == 0, result.output
    assert fake.calls == ["SPY", "QQQ"]
    assert "Stored 3 bars" in result.output
    assert "No bars returned" in result.output
    # overlaps the fixture's first three bars
    assert BarStore(tmp_path / "bars.db").count_bars("SPY", "1d") == 9


def test_cli_ingest_requires_keys(tmp_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("APCA_API_KEY_ID", raising=False)
    monkeypatch.delenv("APCA_API_SECRET_KEY", raising=False)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_config), "ingest"])
    assert result.exit_code == 1
    assert "[!] ERROR" in result.output
