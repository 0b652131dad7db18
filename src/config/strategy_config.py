"""
Strategy config loader: YAML file -> StrategyConfig, validated against JSON Schema.

A strategy file names the strategy, the symbols it trades and its params:

    name: sma_crossover
    symbols: [SPY, QQQ]
    params:
      fast: 10
      slow: 30

Schema: strategy.schema.json next to this module.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from config.loader import ConfigurationError

logger = logging.getLogger("barreplay.config")

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parent / "strategy.schema.json"


@dataclass(frozen=True)
class StrategyConfig:
    name: str
    symbols: tuple[str, ...]
    params: dict[str, Any] = field(default_factory=dict)


def _validate_schema(data: dict[str, Any], schema_path: Path) -> None:
    """Validate *data* against the JSON Schema at *schema_path*."""
    if not schema_path.exists():
        raise ConfigurationError(f"Schema file not found: {schema_path}")
    with open(schema_path) as f:
        schema = json.load(f)
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as exc:
        raise ConfigurationError(f"Strategy config validation failed: {exc.message}") from exc


def load_strategy_config(
    config_path: str | Path,
    schema_path: str | Path | None = None,
) -> StrategyConfig:
    """Load and validate a strategy file.

    Raises
    ------
    ConfigurationError
        If the file is missing, unparseable, or fails schema validation.
    """
    cfg_path = Path(config_path)
    sch_path = Path(schema_path) if schema_path else DEFAULT_SCHEMA_PATH

    if not cfg_path.exists():
        raise ConfigurationError(f"Strategy config file not found: {cfg_path}")

    try:
        with open(cfg_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Strategy config is not valid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Strategy config must be a YAML mapping, got {type(data).__name__}")

    _validate_schema(data, sch_path)
    logger.debug("Loaded strategy config %s (%d symbols)", cfg_path, len(data["symbols"]))

    return StrategyConfig(
        name=data["name"],
        symbols=tuple(s.upper() for s in data["symbols"]),
        params=dict(data.get("params") or {}),
    )
