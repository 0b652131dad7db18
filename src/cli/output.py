"""
Human-readable backtest output for the terminal or a text file.

All rounding happens here; trade-core hands over full-precision values.
Undefined summary figures (None) render as "n/a".
"""

from __future__ import annotations

from typing import Sequence

from backtest.runner import SymbolResult
from trade_core.contracts import PerformanceSummary, Trade

NA = "n/a"

Row = Sequence[str]


def _money(value: float | None) -> str:
    return NA if value is None else f"${value:.2f}"


def _pct(value: float | None) -> str:
    return NA if value is None else f"{value:.2f}%"


def _iso(ts) -> str:
    return ts.isoformat() if ts is not None else ""


def render_table(rows: Sequence[Row], *, left_cols: int = 1) -> str:
    """Render rows as a bordered plain-text table.

    The first *left_cols* columns are left-aligned, the rest right-aligned.
    """
    if not rows:
        return ""
    n_cols = max(len(r) for r in rows)
    padded = [list(r) + [""] * (n_cols - len(r)) for r in rows]
    widths = [max(len(r[i]) for r in padded) for i in range(n_cols)]
    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [border]
    for r in padded:
        cells = [
            r[i].ljust(widths[i]) if i < left_cols else r[i].rjust(widths[i])
            for i in range(n_cols)
        ]
        lines.append("| " + " | ".join(cells) + " |")
    lines.append(border)
    return "\n".join(lines)


def trade_rows(trades: Sequence[Trade]) -> list[list[str]]:
    """Signal listing: one [BUY] row per trade plus a [SELL] or [****] (assumed closed) row."""
    rows: list[list[str]] = []
    for t in trades:
        rows.append(["[BUY]", t.symbol, _iso(t.buy.timestamp), _money(t.buy.price), "", ""])
        if t.is_open:
            continue
        tag = "[****]" if t.assumed_closed else "[SELL]"
        rows.append([tag, "", _iso(t.sell.timestamp), _money(t.sell.price), _money(t.profit.amt), _pct(t.profit.pct)])
    return rows


def summary_rows(s: PerformanceSummary, *, verbose: bool = False) -> list[list[str]]:
    """Summary block. Verbose rows are padded to the 6-column signal listing."""
    trades_per_day = NA if s.avg_trades_per_day is None else f"~{s.avg_trades_per_day:.0f} trades/day"
    rows = [
        ["Total Profit (Loss)", "", _money(s.total_profit_amt), _pct(s.total_profit_pct)],
        ["Trade Count", f"{s.trade_count}", f"{s.win_count}", f"{s.loss_count}"],
        ["Trade Win (Loss) %", "", _pct(s.win_pct), _pct(s.loss_pct)],
        ["Avg Win (Loss) $", "", _money(s.avg_win_amt), _money(s.avg_loss_amt)],
        ["Avg Win (Loss) %", "", _pct(s.avg_win_pct), _pct(s.avg_loss_pct)],
        ["Buy & Hold P(L)", "", _money(s.buy_hold_amt), _pct(s.buy_hold_pct * 100)],
        ["Avg Time Held", f"{s.avg_time_held_minutes:.0f} minutes", "", ""],
        ["Avg Trades/Day", trades_per_day, "", ""],
    ]
    if not verbose:
        return rows
    wide = []
    for label, a, b, c in rows:
        if label in ("Avg Time Held", "Avg Trades/Day"):
            wide.append(["", label, a, "", "", ""])
        else:
            wide.append(["", label, "", a, b, c])
    return wide


def format_symbol_report(result: SymbolResult, *, verbose: bool = False) -> str:
    """Full report for one symbol: optional signal listing, then the summary."""
    if result.error:
        return f"=== {result.symbol} ===\n[!] {result.error}\n==="
    if result.summary is None:
        return f"=== {result.symbol} ===\nNo trades over {result.bar_count} bars; no summary.\n==="

    if verbose:
        rows: list[list[str]] = [["Signal", "Symbol", "Date", "Price", "P/L $", "P/L %"]]
        rows.extend(trade_rows(list(result.ledger)))
        rows.append([""] * 6)
        rows.extend(summary_rows(result.summary, verbose=True))
        table = render_table(rows, left_cols=2)
    else:
        table = render_table(summary_rows(result.summary), left_cols=1)
    return f"=== {result.symbol} ===\n{table}"
