"""Trailing indicator histories.

Each point of a trailing series is the indicator recomputed from scratch over
the prefix of candles ending at that point, so the last point always equals
the full-sequence value returned by :mod:`analysis.indicators`.
"""
from __future__ import annotations

from typing import Callable

from analysis.indicators import (
    MACD_MIN_LENGTH,
    atr_min_length,
    calculate_atr,
    calculate_ema,
    calculate_macd,
    calculate_rsi,
    ema_min_length,
    rsi_min_length,
)
from market.models import CandleSequence, TrailingSeries

TRAILING_WINDOW = 10

Indicator = Callable[[CandleSequence], float]


def window_start(length: int, window: int = TRAILING_WINDOW) -> int:
    """Index of the first candle inside the trailing window."""
    return max(0, length - window)


def sample_series(
    candles: CandleSequence,
    indicator: Indicator,
    min_length: int,
    window: int = TRAILING_WINDOW,
) -> TrailingSeries:
    """Evaluate ``indicator`` over growing prefixes inside the trailing window.

    Args:
        candles: Candle sequence, oldest first.
        indicator: Function of a candle prefix returning one value.
        min_length: Shortest prefix for which the indicator is defined.
            Prefixes shorter than this are skipped rather than zero-filled.
        window: Number of trailing candles to cover.

    Returns:
        Tuple of values, oldest first, right-aligned to the latest candle.
    """
    values = []
    for index in range(window_start(len(candles), window), len(candles)):
        if index + 1 < min_length:
            continue
        values.append(indicator(candles[: index + 1]))
    return tuple(values)


def mid_price_series(candles: CandleSequence, window: int = TRAILING_WINDOW) -> TrailingSeries:
    """Closing prices of the trailing window; never gated."""
    return tuple(c.close for c in candles[window_start(len(candles), window):])


def ema_series(candles: CandleSequence, period: int, window: int = TRAILING_WINDOW) -> TrailingSeries:
    return sample_series(
        candles,
        lambda prefix: calculate_ema(prefix, period),
        ema_min_length(period),
        window,
    )


def macd_series(candles: CandleSequence, window: int = TRAILING_WINDOW) -> TrailingSeries:
    return sample_series(candles, calculate_macd, MACD_MIN_LENGTH, window)


def rsi_series(candles: CandleSequence, period: int, window: int = TRAILING_WINDOW) -> TrailingSeries:
    return sample_series(
        candles,
        lambda prefix: calculate_rsi(prefix, period),
        rsi_min_length(period),
        window,
    )


def atr_series(candles: CandleSequence, period: int, window: int = TRAILING_WINDOW) -> TrailingSeries:
    return sample_series(
        candles,
        lambda prefix: calculate_atr(prefix, period),
        atr_min_length(period),
        window,
    )
