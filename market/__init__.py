"""Market data model, symbols and kline intervals."""
from market.models import (
    Candle,
    CandleSequence,
    TrailingSeries,
    OpenInterest,
    IntradaySeries,
    LongerTermContext,
    Snapshot,
)
from market.symbols import normalize_symbol, to_ccxt_symbol, DEFAULT_QUOTE_ASSET
from market.intervals import (
    select_interval,
    calculate_intraday_limit,
    bars_per_hour,
    LONG_TERM_INTERVAL,
    DEFAULT_LONG_TERM_LIMIT,
    DEFAULT_SCAN_INTERVAL_MINUTES,
)

__all__ = [
    # Models
    "Candle",
    "CandleSequence",
    "TrailingSeries",
    "OpenInterest",
    "IntradaySeries",
    "LongerTermContext",
    "Snapshot",
    # Symbols
    "normalize_symbol",
    "to_ccxt_symbol",
    "DEFAULT_QUOTE_ASSET",
    # Intervals
    "select_interval",
    "calculate_intraday_limit",
    "bars_per_hour",
    "LONG_TERM_INTERVAL",
    "DEFAULT_LONG_TERM_LIMIT",
    "DEFAULT_SCAN_INTERVAL_MINUTES",
]
