"""
Structured journal: append-only JSON lines. One event per signal, closed trade, summary and error.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from trade_core.contracts import PerformanceSummary, Trade


def _serialize(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if hasattr(obj, "__dict__") and not isinstance(obj, type):
        return {k: _serialize(v) for k, v in vars(obj).items() if not k.startswith("_")}
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_serialize(x) for x in obj]
    return obj


class JournalWriter:
    """Append-only journal. Each line is a JSON object with event type and payload."""

    def __init__(self, path: str | Path, *, echo_stdout: bool = False) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._echo = echo_stdout

    def _write(self, event_type: str, payload: dict) -> None:
        record = {"ts_utc": datetime.now(timezone.utc).isoformat(), "event": event_type, **payload}
        line = json.dumps(_serialize(record)) + "\n"
        with open(self._path, "a") as f:
            f.write(line)
        if self._echo:
            print(line.rstrip())

    def signal(self, symbol: str, side: str, price: float, bar_time: datetime, **extra: Any) -> None:
        self._write("signal", {"symbol": symbol, "side": side, "price": price, "bar_time": bar_time, **extra})

    def trade(self, trade: Trade, **extra: Any) -> None:
        self._write("trade", {"symbol": trade.symbol, "trade": trade, **extra})

    def summary(self, summary: PerformanceSummary, **extra: Any) -> None:
        self._write("summary", {"symbol": summary.symbol, "summary": summary, **extra})

    def error(self, symbol: str, message: str, **extra: Any) -> None:
        self._write("error", {"symbol": symbol, "message": message, **extra})
