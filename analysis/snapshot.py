"""Market snapshot building.

This module assembles the immutable :class:`~market.models.Snapshot` from an
intraday candle sequence and a 4-hour candle sequence. It operates purely on
in-memory candles; fetching lives in :mod:`market_data.service`.
"""
from __future__ import annotations

import logging
from typing import Optional

from analysis.indicators import calculate_atr, calculate_ema, calculate_macd, calculate_rsi
from analysis.series import ema_series, macd_series, mid_price_series, rsi_series
from market.intervals import DEFAULT_SCAN_INTERVAL_MINUTES, bars_per_hour, select_interval
from market.models import (
    CandleSequence,
    IntradaySeries,
    LongerTermContext,
    OpenInterest,
    Snapshot,
)


def percent_change(current: float, past: float) -> float:
    """Return ``(current - past) / past * 100``, or 0.0 when ``past <= 0``."""
    if past <= 0:
        return 0.0
    return (current - past) / past * 100


def _infer_bar_minutes(candles: CandleSequence) -> Optional[float]:
    if len(candles) < 2:
        return None
    spacing_ms = candles[-1].open_time - candles[-2].open_time
    if spacing_ms <= 0:
        return None
    return spacing_ms / 60_000


def calculate_price_change_1h(candles: CandleSequence, bar_minutes: int, warn_on_mismatch: bool = True) -> float:
    """Percent change of the latest close versus the close one hour earlier.

    The lookback is ``60 // bar_minutes`` bars, so ``candles`` must be spaced
    exactly ``bar_minutes`` apart; otherwise the change is measured over the
    wrong wall-clock span. A mismatch visible in the candle timestamps is
    logged unless ``warn_on_mismatch`` is False.
    """
    lookback = bars_per_hour(bar_minutes)
    observed = _infer_bar_minutes(candles) if warn_on_mismatch else None
    if observed is not None and observed != bar_minutes:
        logging.warning(
            "Intraday candles are %.2f minutes apart but 1h change assumes %d-minute bars.",
            observed,
            bar_minutes,
        )
    if len(candles) < lookback + 1:
        return 0.0
    return percent_change(candles[-1].close, candles[-1 - lookback].close)


def calculate_price_change_4h(candles: CandleSequence) -> float:
    """Percent change of the latest 4h close versus the previous 4h close."""
    if len(candles) < 2:
        return 0.0
    return percent_change(candles[-1].close, candles[-2].close)


def build_intraday_series(candles: CandleSequence, interval: str) -> IntradaySeries:
    return IntradaySeries(
        interval=interval,
        mid_prices=mid_price_series(candles),
        ema20_values=ema_series(candles, 20),
        macd_values=macd_series(candles),
        rsi7_values=rsi_series(candles, 7),
        rsi14_values=rsi_series(candles, 14),
    )


def build_longer_term_context(candles: CandleSequence) -> LongerTermContext:
    """Compute the 4-hour horizon block.

    Average volume is the arithmetic mean over the whole supplied sequence.
    """
    current_volume = 0.0
    average_volume = 0.0
    if len(candles) > 0:
        current_volume = candles[-1].volume
        total = 0.0
        for candle in candles:
            total += candle.volume
        average_volume = total / len(candles)

    return LongerTermContext(
        ema20=calculate_ema(candles, 20),
        ema50=calculate_ema(candles, 50),
        atr3=calculate_atr(candles, 3),
        atr14=calculate_atr(candles, 14),
        current_volume=current_volume,
        average_volume=average_volume,
        macd_values=macd_series(candles),
        rsi14_values=rsi_series(candles, 14),
    )


def build_snapshot(
    symbol: str,
    scan_interval_minutes: int,
    intraday_candles: CandleSequence,
    long_term_candles: CandleSequence,
    open_interest: Optional[OpenInterest] = None,
    funding_rate: float = 0.0,
    bar_minutes: Optional[int] = None,
) -> Snapshot:
    """Assemble a market snapshot from intraday and 4-hour candles.

    This helper operates purely on candle sequences without performing any
    I/O. Insufficient history never raises: the affected fields are 0.0 and
    the affected series are shortened or empty.

    Args:
        symbol: Normalised symbol stored verbatim (e.g., "BTCUSDT").
        scan_interval_minutes: Caller's scan interval; selects the intraday
            interval label and, unless ``bar_minutes`` is given, the bar
            spacing assumed by the 1h price change.
        intraday_candles: Intraday candles, oldest first.
        long_term_candles: 4-hour candles, oldest first.
        open_interest: Open interest context; zeros when omitted.
        funding_rate: Latest funding rate.
        bar_minutes: Spacing the 1h price change assumes for
            ``intraday_candles``. Passing it explicitly accepts that value
            even when the candle timestamps disagree; only the scan-derived
            default is checked against them.

    Returns:
        Immutable Snapshot.

    Raises:
        ValueError: If ``scan_interval_minutes`` or ``bar_minutes`` is not
            positive.
    """
    if scan_interval_minutes <= 0:
        raise ValueError(f"scan_interval_minutes must be positive, got {scan_interval_minutes}")
    check_spacing = bar_minutes is None
    if bar_minutes is None:
        bar_minutes = scan_interval_minutes

    interval = select_interval(scan_interval_minutes)
    current_price = intraday_candles[-1].close if len(intraday_candles) > 0 else 0.0

    return Snapshot(
        symbol=symbol,
        current_price=current_price,
        price_change_1h=calculate_price_change_1h(intraday_candles, bar_minutes, check_spacing),
        price_change_4h=calculate_price_change_4h(long_term_candles),
        current_ema20=calculate_ema(intraday_candles, 20),
        current_macd=calculate_macd(intraday_candles),
        current_rsi7=calculate_rsi(intraday_candles, 7),
        open_interest=open_interest if open_interest is not None else OpenInterest(),
        funding_rate=funding_rate,
        intraday_series=build_intraday_series(intraday_candles, interval),
        longer_term_context=build_longer_term_context(long_term_candles),
    )


def build_snapshot_3m(
    symbol: str,
    intraday_candles: CandleSequence,
    long_term_candles: CandleSequence,
    open_interest: Optional[OpenInterest] = None,
    funding_rate: float = 0.0,
) -> Snapshot:
    """Build a snapshot with the default 3-minute scan interval."""
    return build_snapshot(
        symbol,
        DEFAULT_SCAN_INTERVAL_MINUTES,
        intraday_candles,
        long_term_candles,
        open_interest=open_interest,
        funding_rate=funding_rate,
    )
