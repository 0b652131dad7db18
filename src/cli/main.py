"""
CLI entry point: barreplay ingest | backtest.

Every command loads config from --config (default config.yaml) and the
strategy file it names (or -s/--strategy). Backtest flags override the
config file. Fatal errors print "[!] ERROR: ..." and exit 1.
"""

import logging
import sqlite3
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import click
from dotenv import load_dotenv

from config import ConfigurationError, load_config, load_strategy_config, parse_date, validate_capital
from data.fetcher import DataSourceError

load_dotenv()

logger = logging.getLogger("barreplay")


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s  %(message)s",
        stream=sys.stderr,
    )


def _fail(exc: Exception) -> None:
    click.echo(f"[!] ERROR: {exc}", err=True)
    raise SystemExit(1)


def _open_store(path: str):
    from data.bar_store import BarStore

    try:
        return BarStore(path)
    except sqlite3.Error as exc:
        raise DataSourceError(f"Cannot open bar store {path}: {exc}") from exc


@click.group()
@click.option("--config", "config_path", default="config.yaml", help="Path to config file.")
@click.pass_context
def cli(ctx: click.Context, config_path: str) -> None:
    """barreplay: replay price bars through a strategy and summarize its trades."""
    _setup_logging()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# ---------- barreplay ingest ----------


@cli.command()
@click.option("-s", "--strategy", "strategy_path", default=None, help="Strategy file (overrides config).")
@click.option("--days", default=None, type=int, help="Number of calendar days to fetch (default: 30 for intraday, 365 for daily).")
@click.option("--start", "start_str", default=None, help="Start date (ISO, e.g. 2024-01-01).")
@click.option("--end", "end_str", default=None, help="End date (ISO, e.g. 2024-02-01).")
@click.option("--timeframe", "tf_override", default=None, help="Override timeframe (e.g. 1d, 15m). Defaults to config value.")
@click.pass_context
def ingest(
    ctx: click.Context,
    strategy_path: str | None,
    days: int | None,
    start_str: str | None,
    end_str: str | None,
    tf_override: str | None,
) -> None:
    """Fetch bars from Alpaca for every symbol of the strategy and store locally."""
    try:
        cfg = load_config(ctx.obj["config_path"])
        strat_cfg = load_strategy_config(_strategy_file(strategy_path, cfg.strategy))
        tf = tf_override or cfg.timeframe
        if days is None:
            days = 365 if tf == "1d" else 30
        end_dt = parse_date(end_str, "end") or datetime.now(timezone.utc)
        start_dt = parse_date(start_str, "start") or end_dt - timedelta(days=days)

        from data import get_alpaca_fetcher

        fetcher = get_alpaca_fetcher(cfg.data.api_key, cfg.data.api_secret)
        store = _open_store(cfg.data.bar_store_path)

        for symbol in strat_cfg.symbols:
            click.echo(f"Fetching {symbol} {tf} bars from {start_dt.date()} to {end_dt.date()} ...")
            result = fetcher.fetch(symbol, tf, start=start_dt, end=end_dt)
            if not result.bars:
                click.echo("  No bars returned. Check symbol, timeframe, date range, and API keys.")
                continue
            store.write_bars(symbol, tf, result.bars)
            click.echo(f"  Stored {len(result.bars)} bars in {cfg.data.bar_store_path}")
            click.echo(f"  Range: {result.bars[0].timestamp.isoformat()} -> {result.bars[-1].timestamp.isoformat()}")
            click.echo(f"  Total {tf} bars in store: {store.count_bars(symbol, tf)}")
    except (ConfigurationError, DataSourceError, ValueError) as exc:
        _fail(exc)


def _strategy_file(cli_value: str | None, config_value: str) -> str:
    path = cli_value or config_value
    if not path:
        raise ConfigurationError("You must specify a strategy using the -s flag")
    return path


# ---------- barreplay backtest ----------


@cli.command()
@click.option("-s", "--strategy", "strategy_path", default=None, help="Strategy file (overrides config).")
@click.option("-v", "--verbose", is_flag=True, default=False, help="List every BUY/SELL signal along with the summary.")
@click.option("-c", "--capital", type=float, default=None, help="Capital per symbol (default 1000).")
@click.option("-b", "--begin", "begin_str", default=None, help="Begin date filter (ISO, inclusive).")
@click.option("-e", "--end", "end_str", default=None, help="End date filter (ISO, inclusive).")
@click.option("-o", "--tofile", is_flag=True, default=False, help="Write each symbol's report to a file instead of stdout.")
@click.option("-d", "--debug", is_flag=True, default=False, help="Write bars, indicators and signals to a debug CSV.")
@click.pass_context
def backtest(
    ctx: click.Context,
    strategy_path: str | None,
    verbose: bool,
    capital: float | None,
    begin_str: str | None,
    end_str: str | None,
    tofile: bool,
    debug: bool,
) -> None:
    """Replay stored bars through the strategy and show the performance summary."""
    from backtest import run_backtest, write_debug_csv
    from cli.output import format_symbol_report
    from data import load_history
    from journal import JournalWriter
    from strategies import load_strategy

    try:
        cfg = load_config(ctx.obj["config_path"])
        strat_cfg = load_strategy_config(_strategy_file(strategy_path, cfg.strategy))
        strategy = load_strategy(strat_cfg.name, strat_cfg.symbols, strat_cfg.params)
        run_capital = validate_capital(capital if capital is not None else cfg.backtest.capital)
        begin = parse_date(begin_str if begin_str is not None else cfg.backtest.begin, "begin")
        end = parse_date(end_str if end_str is not None else cfg.backtest.end, "end")

        store = _open_store(cfg.data.bar_store_path)
        history = load_history(store, strat_cfg.symbols, cfg.timeframe, begin=begin, end=end)
    except (ConfigurationError, DataSourceError) as exc:
        _fail(exc)
        return

    verbose = verbose or cfg.output.verbose
    tofile = tofile or cfg.output.to_file
    debug = debug or cfg.output.debug
    if verbose:
        logger.setLevel(logging.DEBUG)

    journal = JournalWriter(cfg.journal.path, echo_stdout=cfg.journal.echo_stdout)

    def on_event(event_type: str, payload: dict) -> None:
        if event_type == "signal":
            sig = payload["signal"]
            journal.signal(sig.symbol, sig.side, sig.bar.close, sig.bar.timestamp)
        elif event_type in ("exit", "assumed_exit"):
            journal.trade(payload["trade"])
        elif event_type == "summary":
            journal.summary(payload["summary"])
        elif event_type == "error":
            journal.error(payload["symbol"], payload["message"])

    click.echo(f"Running backtest: {strat_cfg.name} on {', '.join(strat_cfg.symbols)} ({cfg.timeframe}), capital ${run_capital:,.2f} ...")
    result = run_backtest(history, strategy, capital=run_capital, journal_callback=on_event)

    out_dir = Path(cfg.output.dir)
    for symbol, sym_result in result.results.items():
        if debug and sym_result.bar_count:
            path = write_debug_csv(out_dir / f"debug_{symbol}.csv", strategy.series(symbol), sym_result.ledger)
            click.echo(f"Debug data for {symbol} written to {path}")

        report = format_symbol_report(sym_result, verbose=verbose)
        if tofile:
            out_dir.mkdir(parents=True, exist_ok=True)
            path = out_dir / f"backtest_{symbol}.txt"
            path.write_text(report, encoding="utf-8")
            click.echo(f"Results for {symbol} written to {path}")
        else:
            click.echo(report)


if __name__ == "__main__":
    cli()
