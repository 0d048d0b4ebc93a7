"""
Market data client initialization and management.

This module handles the initialization and caching of the market data
provider selected by ``MARKET_DATA_BACKEND``.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import ccxt
from binance.client import Client
from binance.exceptions import BinanceAPIException
from requests.exceptions import RequestException, Timeout

from market_data.base import MarketDataError, MarketDataProvider
from market_data.binance import BinanceMarketDataClient
from market_data.ccxt_client import CcxtMarketDataClient
from snapshot_config import SnapshotConfig


# ───────────────────────── CACHED CLIENTS ─────────────────────────
_market_data_client: Optional[MarketDataProvider] = None


def create_binance_client(config: SnapshotConfig) -> Client:
    """Return a python-binance client; keys are optional for public endpoints."""
    try:
        logging.info("Attempting to initialize Binance client...")
        client = Client(
            config.api_key or None,
            config.api_secret or None,
            requests_params={"timeout": config.request_timeout},
        )
        logging.info("Binance client initialized successfully.")
        return client
    except Timeout as exc:
        logging.warning("Timed out while connecting to Binance API: %s", exc)
        raise MarketDataError(f"Timed out while connecting to Binance API: {exc}") from exc
    except (RequestException, BinanceAPIException) as exc:
        logging.error("Network error while connecting to Binance API: %s", exc)
        raise MarketDataError(f"Failed to connect to Binance API: {exc}") from exc


def create_ccxt_exchange(config: SnapshotConfig) -> Any:
    """Instantiate the configured ccxt exchange class."""
    exchange_cls = getattr(ccxt, config.ccxt_exchange_id, None)
    if exchange_cls is None:
        raise MarketDataError(f"Unknown ccxt exchange id '{config.ccxt_exchange_id}'")
    return exchange_cls({
        "enableRateLimit": True,
        "timeout": int(config.request_timeout * 1000),
    })


def get_market_data_client(config: SnapshotConfig) -> MarketDataProvider:
    """Get or initialize the market data client."""
    global _market_data_client
    if _market_data_client is not None:
        return _market_data_client

    backend = config.market_data_backend
    logging.info("Initializing market data backend: %s", backend)

    if backend == "binance":
        _market_data_client = BinanceMarketDataClient(create_binance_client(config))
    elif backend == "ccxt":
        _market_data_client = CcxtMarketDataClient(create_ccxt_exchange(config), config.quote_asset)
    else:
        raise MarketDataError(f"Unsupported market data backend '{backend}'")
    return _market_data_client


def set_market_data_client(client: Optional[MarketDataProvider]) -> None:
    """Set the market data client (for testing)."""
    global _market_data_client
    _market_data_client = client


def reset_clients() -> None:
    """Reset all cached clients (for testing)."""
    global _market_data_client
    _market_data_client = None
