"""
Config loader: YAML file -> frozen dataclass tree.

API secrets resolved from environment variables (APCA_API_KEY_ID, APCA_API_SECRET_KEY).
Config file holds only non-secret values.
"""

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import yaml


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid. Fatal before any replay."""


@dataclass(frozen=True)
class DataConfig:
    source: str
    bar_store_path: str
    api_key: str = ""
    api_secret: str = ""


@dataclass(frozen=True)
class BacktestConfig:
    capital: float = 1000.0
    begin: str = ""
    end: str = ""

    @property
    def begin_dt(self) -> datetime | None:
        return parse_date(self.begin, "begin")

    @property
    def end_dt(self) -> datetime | None:
        return parse_date(self.end, "end")


@dataclass(frozen=True)
class OutputConfig:
    verbose: bool = False
    to_file: bool = False
    dir: str = "output"
    debug: bool = False


@dataclass(frozen=True)
class JournalConfig:
    path: str = "data/journal.jsonl"
    echo_stdout: bool = False


@dataclass(frozen=True)
class AppConfig:
    strategy: str
    timeframe: str
    data: DataConfig
    backtest: BacktestConfig
    output: OutputConfig = OutputConfig()
    journal: JournalConfig = JournalConfig()


def parse_date(value: str | None, field_name: str = "date") -> datetime | None:
    """Parse an ISO date/datetime as UTC. Empty means unbounded."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(str(value))
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {field_name} date '{value}': expected ISO format (e.g. 2018-01-01)") from exc
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def validate_capital(capital: float) -> float:
    try:
        value = float(capital)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"capital must be a number, got {capital!r}") from exc
    if not value > 0:
        raise ConfigurationError(f"capital must be > 0, got {value}")
    return value


def load_config(path: str | Path = "config.yaml") -> AppConfig:
    """
    Load configuration from a YAML file.

    API keys are resolved from environment variables:
      - APCA_API_KEY_ID
      - APCA_API_SECRET_KEY
    These follow Alpaca's standard env var names.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Config file is not valid YAML: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    data_raw = raw.get("data") or {}
    data_cfg = DataConfig(
        source=data_raw.get("source", "alpaca"),
        bar_store_path=data_raw.get("bar_store_path", "data/bars.db"),
        api_key=os.environ.get("APCA_API_KEY_ID", ""),
        api_secret=os.environ.get("APCA_API_SECRET_KEY", ""),
    )

    bt_raw = raw.get("backtest") or {}
    begin = str(bt_raw.get("begin") or "")
    end = str(bt_raw.get("end") or "")
    parse_date(begin, "begin")
    parse_date(end, "end")
    bt_cfg = BacktestConfig(
        capital=validate_capital(bt_raw.get("capital", 1000)),
        begin=begin,
        end=end,
    )

    out_raw = raw.get("output") or {}
    out_cfg = OutputConfig(
        verbose=bool(out_raw.get("verbose", False)),
        to_file=bool(out_raw.get("to_file", False)),
        dir=str(out_raw.get("dir", "output")),
        debug=bool(out_raw.get("debug", False)),
    )

    j_raw = raw.get("journal") or {}
    j_cfg = JournalConfig(
        path=j_raw.get("path", "data/journal.jsonl"),
        echo_stdout=bool(j_raw.get("echo_stdout", False)),
    )

    return AppConfig(
        strategy=str(raw.get("strategy") or ""),
        timeframe=str(raw.get("timeframe", "1d")),
        data=data_cfg,
        backtest=bt_cfg,
        output=out_cfg,
        journal=j_cfg,
    )
