"""Analysis layer: indicator engine, trailing series and snapshot building."""
from analysis.indicators import (
    calculate_ema,
    calculate_macd,
    calculate_rsi,
    calculate_atr,
    true_range,
)
from analysis.series import (
    TRAILING_WINDOW,
    sample_series,
    mid_price_series,
    ema_series,
    macd_series,
    rsi_series,
    atr_series,
)
from analysis.snapshot import build_snapshot, build_snapshot_3m

__all__ = [
    "calculate_ema",
    "calculate_macd",
    "calculate_rsi",
    "calculate_atr",
    "true_range",
    "TRAILING_WINDOW",
    "sample_series",
    "mid_price_series",
    "ema_series",
    "macd_series",
    "rsi_series",
    "atr_series",
    "build_snapshot",
    "build_snapshot_3m",
]
