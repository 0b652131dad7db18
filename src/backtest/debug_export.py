"""Dump a symbol's bars, indicators and signal markers to CSV for debugging."""

import csv
from pathlib import Path

from strategies.base import SymbolSeries
from trade_core.ledger import TradeLedger

BUY_MARK = 1
SELL_MARK = 2


def write_debug_csv(path: str | Path, series: SymbolSeries, ledger: TradeLedger) -> Path:
    """Write one row per bar: OHLCV, trade count, each indicator, signal marker.

    Missing indicator values are written as 0. The signal column is 1 on a
    buy bar, 2 on a sell (or assumed-close) bar, 0 otherwise.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    indicators = list(series.indicators)

    marks: dict = {}
    for trade in ledger:
        marks[trade.buy.timestamp] = BUY_MARK
        if trade.sell.timestamp is not None:
            marks[trade.sell.timestamp] = SELL_MARK

    with open(out, "w", newline="") as f:
        writer = csv.writer(f, lineterminator="\r\n")
        writer.writerow(["date", "open", "high", "low", "close", "volume", "trades", *indicators, "signal"])
        for i, ts in enumerate(series.times):
            row = [
                ts.isoformat(),
                series.open[i],
                series.high[i],
                series.low[i],
                series.close[i],
                series.volume[i],
                series.trades[i],
            ]
            for name in indicators:
                values = series.indicators[name]
                value = values[i] if i < len(values) else None
                row.append(value if value else 0)
            row.append(marks.get(ts, 0))
            writer.writerow(row)
    return out
