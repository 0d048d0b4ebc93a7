"""
CLI entry point for perp-snapshot.

Usage:
    python -m cli.main <command> [args...]

Or if installed as console script:
    perp-snapshot <command> [args...]
"""
from __future__ import annotations

import logging
from typing import Optional

import click
from colorama import init as colorama_init

from analysis.snapshot import build_snapshot
from cli.output import print_error, print_snapshot
from market.models import OpenInterest
from market.symbols import normalize_symbol
from market_data.base import MarketDataError
from market_data.clients import get_market_data_client
from market_data.frames import load_candles_csv
from market_data.service import get_market_data
from snapshot_config import emit_early_env_warnings, load_env_file, load_snapshot_config_from_env


# Configure logging for CLI
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Perp Snapshot CLI - technical analysis snapshots for perpetual futures."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    load_env_file()
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['config'] = load_snapshot_config_from_env()
    emit_early_env_warnings()


@cli.command()
@click.argument('symbol')
@click.option('--scan-interval', type=click.IntRange(min=1), default=None,
              help='Scan interval in minutes (defaults to SNAPSHOT_SCAN_INTERVAL_MINUTES)')
@click.option('--json', 'as_json', is_flag=True, help='Print the snapshot as JSON')
@click.pass_context
def snapshot(ctx: click.Context, symbol: str, scan_interval: Optional[int], as_json: bool) -> None:
    """Fetch market data for SYMBOL and print its snapshot."""
    config = ctx.obj['config']
    try:
        provider = get_market_data_client(config)
        result = get_market_data(
            symbol,
            provider,
            scan_interval_minutes=scan_interval or config.scan_interval_minutes,
            long_term_limit=config.long_term_limit,
            quote_asset=config.quote_asset,
        )
    except MarketDataError as exc:
        print_error(str(exc))
        return
    print_snapshot(result, as_json)


@cli.command('snapshot-csv')
@click.argument('symbol')
@click.argument('intraday_csv', type=click.Path(exists=True, dir_okay=False))
@click.argument('long_term_csv', type=click.Path(exists=True, dir_okay=False))
@click.option('--scan-interval', type=click.IntRange(min=1), default=None,
              help='Scan interval in minutes matching the intraday CSV bars')
@click.option('--open-interest', type=float, default=0.0, help='Latest open interest')
@click.option('--funding-rate', type=float, default=0.0, help='Latest funding rate')
@click.option('--json', 'as_json', is_flag=True, help='Print the snapshot as JSON')
@click.pass_context
def snapshot_csv(
    ctx: click.Context,
    symbol: str,
    intraday_csv: str,
    long_term_csv: str,
    scan_interval: Optional[int],
    open_interest: float,
    funding_rate: float,
    as_json: bool,
) -> None:
    """Build a snapshot for SYMBOL from exported intraday and 4h kline CSVs."""
    config = ctx.obj['config']
    try:
        intraday_candles = load_candles_csv(intraday_csv)
        long_term_candles = load_candles_csv(long_term_csv)
    except ValueError as exc:
        print_error(str(exc))
        return

    result = build_snapshot(
        normalize_symbol(symbol, config.quote_asset),
        scan_interval or config.scan_interval_minutes,
        intraday_candles,
        long_term_candles,
        open_interest=OpenInterest.from_latest(open_interest),
        funding_rate=funding_rate,
    )
    print_snapshot(result, as_json)


def main() -> None:
    colorama_init()
    cli(obj={})


if __name__ == "__main__":
    main()
