"""ccxt-backed market data client.

Lets the snapshot service read candles, open interest and funding from any
ccxt exchange with swap markets (``binanceusdm`` by default). Raw symbols
such as ``BTCUSDT`` are mapped to ccxt's unified ``BTC/USDT:USDT`` form.
"""
from __future__ import annotations

import logging
from typing import Any, List

import ccxt

from market.intervals import interval_to_milliseconds
from market.models import Candle, OpenInterest
from market.symbols import DEFAULT_QUOTE_ASSET, to_ccxt_symbol
from market_data.base import MarketDataError, _safe_float
from market_data.frames import klines_to_candles


class CcxtMarketDataClient:
    """MarketDataProvider implementation for ccxt exchanges."""

    backend = "ccxt"

    def __init__(self, exchange: Any, quote_asset: str = DEFAULT_QUOTE_ASSET) -> None:
        self._exchange = exchange
        self._quote_asset = quote_asset

    def _market(self, symbol: str) -> str:
        return to_ccxt_symbol(symbol, self._quote_asset)

    def fetch_candles(self, symbol: str, interval: str, limit: int) -> List[Candle]:
        market = self._market(symbol)
        try:
            rows = self._exchange.fetch_ohlcv(market, timeframe=interval, limit=limit)
        except ccxt.BaseError as exc:
            raise MarketDataError(f"{self._exchange.id} OHLCV request failed for {market} {interval}: {exc}") from exc

        # OHLCV rows carry no close time; derive it from the interval.
        span_ms = interval_to_milliseconds(interval)
        try:
            rows = [list(row[:6]) + [int(row[0]) + span_ms - 1] for row in rows or []]
            candles = klines_to_candles(rows)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise MarketDataError(f"Malformed {self._exchange.id} OHLCV rows for {market} {interval}: {exc!r}") from exc
        logging.debug("Fetched %d %s candles for %s from %s", len(candles), interval, market, self._exchange.id)
        return candles

    def fetch_open_interest(self, symbol: str) -> OpenInterest:
        market = self._market(symbol)
        try:
            payload = self._exchange.fetch_open_interest(market)
        except ccxt.BaseError as exc:
            raise MarketDataError(f"{self._exchange.id} open interest request failed for {market}: {exc}") from exc
        payload = payload or {}
        latest = payload.get("openInterestAmount")
        if latest is None:
            info = payload.get("info") or {}
            latest = info.get("openInterest")
        return OpenInterest.from_latest(_safe_float(latest))

    def fetch_funding_rate(self, symbol: str) -> float:
        market = self._market(symbol)
        try:
            payload = self._exchange.fetch_funding_rate(market)
        except ccxt.BaseError as exc:
            raise MarketDataError(f"{self._exchange.id} funding rate request failed for {market}: {exc}") from exc
        return _safe_float((payload or {}).get("fundingRate"))
