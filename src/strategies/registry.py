"""Resolve a strategy by built-in name or ``package.module:ClassName`` path."""

from __future__ import annotations

import importlib
from typing import Any, Iterable

from config.loader import ConfigurationError
from strategies.base import BaseStrategy
from strategies.sma_crossover import SmaCrossover

BUILTIN_STRATEGIES: dict[str, type[BaseStrategy]] = {
    SmaCrossover.name: SmaCrossover,
}


def _import_strategy_class(path: str) -> type[BaseStrategy]:
    module_name, _, class_name = path.partition(":")
    if not module_name or not class_name:
        raise ConfigurationError(f"Strategy path must look like 'module:ClassName', got '{path}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Failed to import strategy module {module_name}: {exc}") from exc
    cls = getattr(module, class_name, None)
    if not isinstance(cls, type) or not issubclass(cls, BaseStrategy):
        raise ConfigurationError(f"{path} is not a BaseStrategy subclass")
    return cls


def load_strategy(
    name: str,
    symbols: Iterable[str],
    params: dict[str, Any] | None = None,
) -> BaseStrategy:
    """Instantiate the named strategy for *symbols*.

    Raises
    ------
    ConfigurationError
        Unknown name, bad import path, no symbols, or invalid params.
    """
    symbols = list(symbols)
    if not symbols:
        raise ConfigurationError(f"Strategy '{name}' has no symbols configured")
    if name in BUILTIN_STRATEGIES:
        cls = BUILTIN_STRATEGIES[name]
    elif ":" in name:
        cls = _import_strategy_class(name)
    else:
        raise ConfigurationError(
            f"Unknown strategy '{name}'. Built-in: {sorted(BUILTIN_STRATEGIES)}"
        )
    try:
        return cls(symbols, params or {})
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid params for strategy '{name}': {exc}") from exc
