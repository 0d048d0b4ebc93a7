"""Market data structures shared by the analysis and provider layers.

All records are frozen: a snapshot is built once from immutable candles and
never mutated afterwards.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Sequence, Tuple


@dataclass(frozen=True, slots=True)
class Candle:
    """A single OHLCV bar.

    Attributes:
        open_time: Bar open time in epoch milliseconds.
        open: Opening price.
        high: Highest traded price.
        low: Lowest traded price.
        close: Closing price.
        volume: Base-asset volume.
        close_time: Bar close time in epoch milliseconds.
    """

    open_time: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    close_time: int


# Oldest first, latest last.
CandleSequence = Sequence[Candle]

# Up to ``TRAILING_WINDOW`` indicator values, oldest first.
TrailingSeries = Tuple[float, ...]


@dataclass(frozen=True, slots=True)
class OpenInterest:
    """Open interest context for a perpetual contract."""

    latest: float = 0.0
    average: float = 0.0

    @classmethod
    def from_latest(cls, latest: float) -> "OpenInterest":
        # No historical OI feed is consumed, so the average is approximated.
        return cls(latest=latest, average=latest * 0.999)


@dataclass(frozen=True, slots=True)
class IntradaySeries:
    """Trailing indicator history on the intraday interval."""

    interval: str
    mid_prices: TrailingSeries = field(default_factory=tuple)
    ema20_values: TrailingSeries = field(default_factory=tuple)
    macd_values: TrailingSeries = field(default_factory=tuple)
    rsi7_values: TrailingSeries = field(default_factory=tuple)
    rsi14_values: TrailingSeries = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class LongerTermContext:
    """4-hour horizon statistics and trailing history."""

    ema20: float = 0.0
    ema50: float = 0.0
    atr3: float = 0.0
    atr14: float = 0.0
    current_volume: float = 0.0
    average_volume: float = 0.0
    macd_values: TrailingSeries = field(default_factory=tuple)
    rsi14_values: TrailingSeries = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Point-in-time technical analysis snapshot for one symbol.

    Series inside ``intraday_series`` and ``longer_term_context`` are each
    right-aligned to the latest candle of their source sequence. They are not
    co-indexed: an indicator series only starts once its own minimum history
    is available, so lengths differ across series.
    """

    symbol: str
    current_price: float
    price_change_1h: float
    price_change_4h: float
    current_ema20: float
    current_macd: float
    current_rsi7: float
    open_interest: OpenInterest
    funding_rate: float
    intraday_series: IntradaySeries
    longer_term_context: LongerTermContext

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable dictionary (series become lists)."""
        return _lists_from_tuples(asdict(self))


def _lists_from_tuples(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _lists_from_tuples(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_lists_from_tuples(item) for item in value]
    return value
