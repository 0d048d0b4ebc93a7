"""Market data providers and the snapshot fetch service."""
from market_data.base import CandleFetchError, MarketDataError, MarketDataProvider
from market_data.binance import BinanceMarketDataClient
from market_data.ccxt_client import CcxtMarketDataClient
from market_data.frames import (
    KLINE_COLUMNS,
    klines_to_frame,
    klines_to_candles,
    frame_to_candles,
    load_candles_csv,
    normalize_kline_dataframe,
)
from market_data.service import get_market_data, get_market_data_3m

__all__ = [
    # Base types
    "CandleFetchError",
    "MarketDataError",
    "MarketDataProvider",
    # Backends
    "BinanceMarketDataClient",
    "CcxtMarketDataClient",
    # Kline normalisation
    "KLINE_COLUMNS",
    "klines_to_frame",
    "klines_to_candles",
    "frame_to_candles",
    "load_candles_csv",
    "normalize_kline_dataframe",
    # Service
    "get_market_data",
    "get_market_data_3m",
]
