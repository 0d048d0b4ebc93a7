"""Kline interval helpers.

Maps the caller's scan interval to the intraday kline interval and decides
how much history to request for each horizon.
"""
from __future__ import annotations

from typing import Dict

LONG_TERM_INTERVAL = "4h"
DEFAULT_LONG_TERM_LIMIT = 60
DEFAULT_SCAN_INTERVAL_MINUTES = 3

# 26 bars for MACD plus margin.
MIN_INTRADAY_LIMIT = 40

INTERVAL_TO_MINUTES: Dict[str, int] = {
    "1m": 1,
    "3m": 3,
    "5m": 5,
    "15m": 15,
    "30m": 30,
    "1h": 60,
    "2h": 120,
    "4h": 240,
    "6h": 360,
    "8h": 480,
    "12h": 720,
    "1d": 1440,
}


def _require_positive(minutes: int, name: str = "scan_interval_minutes") -> int:
    if minutes <= 0:
        raise ValueError(f"{name} must be positive, got {minutes}")
    return minutes


def select_interval(scan_interval_minutes: int) -> str:
    """Return the kline interval matching a scan interval in minutes."""
    if scan_interval_minutes <= 1:
        return "1m"
    if scan_interval_minutes <= 3:
        return "3m"
    if scan_interval_minutes <= 5:
        return "5m"
    if scan_interval_minutes <= 15:
        return "15m"
    if scan_interval_minutes <= 30:
        return "30m"
    return "1h"


def calculate_intraday_limit(scan_interval_minutes: int) -> int:
    """Number of intraday klines to request: two hours of bars, at least 40."""
    _require_positive(scan_interval_minutes)
    return max(MIN_INTRADAY_LIMIT, 120 // scan_interval_minutes)


def bars_per_hour(bar_minutes: int) -> int:
    """Number of bars spanning one hour at the given bar spacing."""
    _require_positive(bar_minutes, "bar_minutes")
    return 60 // bar_minutes


def interval_to_milliseconds(interval: str) -> int:
    try:
        return INTERVAL_TO_MINUTES[interval] * 60_000
    except KeyError as exc:
        raise ValueError(f"Unsupported interval '{interval}'") from exc
