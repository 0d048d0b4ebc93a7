"""Market snapshot service.

Fetches the intraday and 4-hour candle sequences plus open interest and
funding for one symbol and hands them to :func:`analysis.snapshot.build_snapshot`.

Candle fetch failures abort the snapshot with :class:`CandleFetchError`.
Open interest and funding failures only log a warning and fall back to zero.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List

from analysis.snapshot import build_snapshot
from market.intervals import (
    DEFAULT_LONG_TERM_LIMIT,
    DEFAULT_SCAN_INTERVAL_MINUTES,
    INTERVAL_TO_MINUTES,
    LONG_TERM_INTERVAL,
    bars_per_hour,
    calculate_intraday_limit,
    select_interval,
)
from market.models import Candle, OpenInterest, Snapshot
from market.symbols import DEFAULT_QUOTE_ASSET, normalize_symbol
from market_data.base import CandleFetchError, MarketDataError, MarketDataProvider


def _fetch_series(
    provider: MarketDataProvider,
    symbol: str,
    interval: str,
    limit: int,
    series: str,
) -> List[Candle]:
    try:
        candles = provider.fetch_candles(symbol, interval, limit)
    except MarketDataError as exc:
        raise CandleFetchError(symbol, interval, series, exc) from exc
    if not candles:
        raise CandleFetchError(symbol, interval, series, MarketDataError("no candles returned"))
    return candles


def fetch_open_interest_or_default(provider: MarketDataProvider, symbol: str) -> OpenInterest:
    try:
        return provider.fetch_open_interest(symbol)
    except MarketDataError as exc:
        logging.warning("Open interest unavailable for %s, using zeros: %s", symbol, exc)
        return OpenInterest()


def fetch_funding_rate_or_default(provider: MarketDataProvider, symbol: str) -> float:
    try:
        return provider.fetch_funding_rate(symbol)
    except MarketDataError as exc:
        logging.warning("Funding rate unavailable for %s, using 0: %s", symbol, exc)
        return 0.0


def get_market_data(
    symbol: str,
    provider: MarketDataProvider,
    scan_interval_minutes: int = DEFAULT_SCAN_INTERVAL_MINUTES,
    long_term_limit: int = DEFAULT_LONG_TERM_LIMIT,
    quote_asset: str = DEFAULT_QUOTE_ASSET,
) -> Snapshot:
    """Fetch market data for ``symbol`` and build its snapshot.

    The intraday interval is chosen from ``scan_interval_minutes`` and
    ``max(40, 120 // scan_interval_minutes)`` intraday candles are requested.
    Both candle sequences are fetched concurrently.

    Args:
        symbol: Raw or normalised symbol (e.g., "btc", "BTCUSDT").
        provider: Market data backend.
        scan_interval_minutes: Caller's scan interval in minutes.
        long_term_limit: Number of 4-hour candles to request.
        quote_asset: Quote asset appended during normalisation.

    Returns:
        Snapshot for the normalised symbol.

    Raises:
        CandleFetchError: If either candle sequence cannot be fetched.
        ValueError: If ``scan_interval_minutes`` is not positive.
    """
    symbol = normalize_symbol(symbol, quote_asset)
    interval = select_interval(scan_interval_minutes)
    intraday_limit = calculate_intraday_limit(scan_interval_minutes)
    if INTERVAL_TO_MINUTES[interval] != scan_interval_minutes:
        # The 1h change keeps the scan-derived lookback over the rounded bars.
        logging.debug(
            "Scan interval %dm is served by %s candles; 1h change looks back %d bars.",
            scan_interval_minutes,
            interval,
            bars_per_hour(scan_interval_minutes),
        )

    logging.info(
        "Fetching %s snapshot data: %d x %s and %d x %s candles",
        symbol,
        intraday_limit,
        interval,
        long_term_limit,
        LONG_TERM_INTERVAL,
    )
    with ThreadPoolExecutor(max_workers=2) as pool:
        intraday_future = pool.submit(_fetch_series, provider, symbol, interval, intraday_limit, "intraday")
        long_term_future = pool.submit(
            _fetch_series, provider, symbol, LONG_TERM_INTERVAL, long_term_limit, LONG_TERM_INTERVAL
        )
        intraday_candles = intraday_future.result()
        long_term_candles = long_term_future.result()

    open_interest = fetch_open_interest_or_default(provider, symbol)
    funding_rate = fetch_funding_rate_or_default(provider, symbol)

    return build_snapshot(
        symbol,
        scan_interval_minutes,
        intraday_candles,
        long_term_candles,
        open_interest=open_interest,
        funding_rate=funding_rate,
        bar_minutes=scan_interval_minutes,
    )


def get_market_data_3m(symbol: str, provider: MarketDataProvider) -> Snapshot:
    """Fetch and build a snapshot with the default 3-minute scan interval."""
    return get_market_data(symbol, provider, DEFAULT_SCAN_INTERVAL_MINUTES)
