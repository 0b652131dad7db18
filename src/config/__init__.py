"""
Configuration loaders.

App config:       reads config.yaml, resolves env vars for secrets.
Strategy config:  reads a strategy YAML file, validates against JSON Schema.
"""

from config.loader import (
    AppConfig,
    BacktestConfig,
    ConfigurationError,
    DataConfig,
    JournalConfig,
    OutputConfig,
    load_config,
    parse_date,
    validate_capital,
)
from config.strategy_config import StrategyConfig, load_strategy_config

__all__ = [
    # App config (YAML)
    "AppConfig",
    "BacktestConfig",
    "ConfigurationError",
    "DataConfig",
    "JournalConfig",
    "OutputConfig",
    "load_config",
    "parse_date",
    "validate_capital",
    # Strategy config (YAML + schema)
    "StrategyConfig",
    "load_strategy_config",
]
