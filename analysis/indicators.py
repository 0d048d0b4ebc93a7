"""Technical indicator calculations.

This module provides the indicator engine used by the snapshot builder:
EMA, MACD, RSI and ATR evaluated over a candle sequence (oldest first).

Every function returns a single float for the last candle of the sequence
and falls back to ``0.0`` when the sequence is too short for the requested
period. EMA is seeded with the simple mean of the first ``period`` closes;
RSI and ATR use Wilder's smoothing seeded with a simple mean.
"""
from __future__ import annotations

from typing import Iterable

import numpy as np

from market.models import CandleSequence

MACD_FAST = 12
MACD_SLOW = 26
MACD_MIN_LENGTH = MACD_SLOW


def ema_min_length(period: int) -> int:
    """Shortest sequence for which EMA(period) is defined."""
    return period


def rsi_min_length(period: int) -> int:
    """Shortest sequence for which RSI(period) is defined."""
    return period + 1


def atr_min_length(period: int) -> int:
    """Shortest sequence for which ATR(period) is defined."""
    return period + 1


def closes(candles: CandleSequence) -> np.ndarray:
    """Return closing prices as a float array."""
    return np.fromiter((c.close for c in candles), dtype=float, count=len(candles))


def _running_sum(values: Iterable[float]) -> float:
    # Left-to-right accumulation keeps seeds reproducible across interpreters.
    total = 0.0
    for value in values:
        total += float(value)
    return total


def calculate_ema(candles: CandleSequence, period: int) -> float:
    """Return the exponential moving average of closes at the last candle.

    Args:
        candles: Candle sequence, oldest first.
        period: EMA period.

    Returns:
        EMA value, or 0.0 when fewer than ``period`` candles are supplied.
    """
    if period <= 0 or len(candles) < period:
        return 0.0

    close = closes(candles)
    ema = _running_sum(close[:period]) / period

    multiplier = 2.0 / (period + 1)
    for price in close[period:]:
        ema = (float(price) - ema) * multiplier + ema
    return ema


def calculate_macd(candles: CandleSequence) -> float:
    """Return the MACD line, EMA(12) minus EMA(26), at the last candle.

    Both EMAs run over the full sequence with the same seeding rule; there is
    no signal line. Returns 0.0 for fewer than 26 candles.
    """
    if len(candles) < MACD_MIN_LENGTH:
        return 0.0
    return calculate_ema(candles, MACD_FAST) - calculate_ema(candles, MACD_SLOW)


def calculate_rsi(candles: CandleSequence, period: int) -> float:
    """Return RSI for the specified period using Wilder's smoothing.

    Args:
        candles: Candle sequence, oldest first.
        period: RSI period.

    Returns:
        RSI in [0, 100]; exactly 100 when the smoothed loss is zero and 0.0
        when the sequence has ``period`` candles or fewer.
    """
    if period <= 0 or len(candles) <= period:
        return 0.0

    delta = np.diff(closes(candles))
    gain = np.where(delta > 0, delta, 0.0)
    loss = np.where(delta > 0, 0.0, -delta)

    avg_gain = _running_sum(gain[:period]) / period
    avg_loss = _running_sum(loss[:period]) / period

    for up, down in zip(gain[period:], loss[period:]):
        avg_gain = (avg_gain * (period - 1) + float(up)) / period
        avg_loss = (avg_loss * (period - 1) + float(down)) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def true_range(candles: CandleSequence) -> np.ndarray:
    """Return per-candle true range.

    Index 0 has no previous close; it is stored as 0.0 and never used by
    :func:`calculate_atr`.
    """
    count = len(candles)
    tr = np.zeros(count, dtype=float)
    if count < 2:
        return tr

    high = np.fromiter((c.high for c in candles), dtype=float, count=count)
    low = np.fromiter((c.low for c in candles), dtype=float, count=count)
    prev_close = closes(candles)[:-1]

    tr[1:] = np.maximum(
        high[1:] - low[1:],
        np.maximum(np.abs(high[1:] - prev_close), np.abs(low[1:] - prev_close)),
    )
    return tr


def calculate_atr(candles: CandleSequence, period: int) -> float:
    """Return Average True Range for the provided period.

    The seed is the mean true range of candles 1..period (the first candle
    has no true range); later candles are Wilder-smoothed.
    """
    if period <= 0 or len(candles) <= period:
        return 0.0

    tr = true_range(candles)
    atr = _running_sum(tr[1 : period + 1]) / period
    for value in tr[period + 1 :]:
        atr = (atr * (period - 1) + float(value)) / period
    return atr
