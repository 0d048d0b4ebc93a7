"""Market data provider base definitions.

This module defines the errors and protocol shared by every market data
backend feeding the snapshot builder.
"""
from __future__ import annotations

from typing import Any, List, Optional, Protocol, runtime_checkable

from market.models import Candle, OpenInterest


class MarketDataError(Exception):
    """A market data request failed at the provider."""


class CandleFetchError(MarketDataError):
    """Fetching one of the two candle sequences failed.

    Attributes:
        symbol: Normalised symbol that was requested.
        interval: Kline interval that was requested.
        series: Which sequence failed, ``"intraday"`` or ``"4h"``.
    """

    def __init__(self, symbol: str, interval: str, series: str, cause: Optional[BaseException] = None) -> None:
        self.symbol = symbol
        self.interval = interval
        self.series = series
        message = f"Failed to fetch {series} {interval} candles for {symbol}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


def _safe_float(value: Any, default: float = 0.0) -> float:
    """Safely convert a value to float."""
    if value is None:
        return default
    try:
        result = float(value)
        return default if result != result else result  # NaN check
    except (TypeError, ValueError):
        return default


@runtime_checkable
class MarketDataProvider(Protocol):
    """Read-only market data interface consumed by the snapshot service."""

    def fetch_candles(self, symbol: str, interval: str, limit: int) -> List[Candle]:
        """Return up to ``limit`` most recent candles, oldest first."""
        ...

    def fetch_open_interest(self, symbol: str) -> OpenInterest:
        """Return the latest open interest."""
        ...

    def fetch_funding_rate(self, symbol: str) -> float:
        """Return the latest funding rate."""
        ...
