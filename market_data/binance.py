"""Binance USDT-M futures market data client.

This module provides the MarketDataProvider implementation backed by the
python-binance REST client.
"""
from __future__ import annotations

import logging
from typing import Any, List

from binance.exceptions import BinanceAPIException, BinanceRequestException
from requests.exceptions import RequestException

from market.models import Candle, OpenInterest
from market_data.base import MarketDataError, _safe_float
from market_data.frames import klines_to_candles

_CLIENT_ERRORS = (BinanceAPIException, BinanceRequestException, RequestException, ValueError)
# Raised while decoding truncated or null-bearing kline rows.
_DECODE_ERRORS = (KeyError, IndexError, TypeError, ValueError)


class BinanceMarketDataClient:
    """MarketDataProvider for Binance futures (fapi) endpoints."""

    backend = "binance"

    def __init__(self, client: Any) -> None:
        self._client = client

    def fetch_candles(self, symbol: str, interval: str, limit: int) -> List[Candle]:
        try:
            rows = self._client.futures_klines(symbol=symbol, interval=interval, limit=limit)
        except _CLIENT_ERRORS as exc:
            raise MarketDataError(f"Binance klines request failed for {symbol} {interval}: {exc}") from exc
        try:
            candles = klines_to_candles(rows)
        except _DECODE_ERRORS as exc:
            raise MarketDataError(f"Malformed Binance klines for {symbol} {interval}: {exc!r}") from exc
        logging.debug("Fetched %d %s klines for %s from Binance", len(candles), interval, symbol)
        return candles

    def fetch_open_interest(self, symbol: str) -> OpenInterest:
        try:
            payload = self._client.futures_open_interest(symbol=symbol)
        except _CLIENT_ERRORS as exc:
            raise MarketDataError(f"Binance open interest request failed for {symbol}: {exc}") from exc
        if not isinstance(payload, dict):
            raise MarketDataError(f"Unexpected open interest payload for {symbol}: {payload!r}")
        return OpenInterest.from_latest(_safe_float(payload.get("openInterest")))

    def fetch_funding_rate(self, symbol: str) -> float:
        """Return ``lastFundingRate`` from the premium index endpoint."""
        try:
            payload = self._client.futures_mark_price(symbol=symbol)
        except _CLIENT_ERRORS as exc:
            raise MarketDataError(f"Binance premium index request failed for {symbol}: {exc}") from exc
        if isinstance(payload, list):
            payload = next((item for item in payload if item.get("symbol") == symbol), {})
        if not isinstance(payload, dict):
            raise MarketDataError(f"Unexpected premium index payload for {symbol}: {payload!r}")
        return _safe_float(payload.get("lastFundingRate"))
