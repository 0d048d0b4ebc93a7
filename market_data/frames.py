"""Kline payload normalisation.

Binance-style kline rows (and CSV exports of them) arrive with numeric
strings and occasionally missing fields; they are normalised through pandas
before being turned into :class:`~market.models.Candle` records.
"""
from __future__ import annotations

from typing import Any, List, Sequence

import numpy as np
import pandas as pd

from market.models import Candle

# Columns returned by Binance kline endpoints
KLINE_COLUMNS: List[str] = [
    "timestamp",
    "open",
    "high",
    "low",
    "close",
    "volume",
    "close_time",
    "quote_volume",
    "trades",
    "taker_base",
    "taker_quote",
    "ignore",
]

CANDLE_COLUMNS: List[str] = ["timestamp", "open", "high", "low", "close", "volume", "close_time"]
PRICE_COLUMNS = ("open", "high", "low", "close", "volume")


def klines_to_frame(rows: Sequence[Sequence[Any]], columns: Sequence[str] = KLINE_COLUMNS) -> pd.DataFrame:
    """Build a normalised frame from raw kline rows.

    Rows may be shorter than ``columns`` (ccxt OHLCV rows have six fields);
    the missing trailing columns are left empty.
    """
    if not rows:
        return pd.DataFrame(columns=CANDLE_COLUMNS)
    width = len(rows[0])
    df = pd.DataFrame([list(row)[:width] for row in rows], columns=list(columns)[:width])
    return normalize_kline_dataframe(df)


def normalize_kline_dataframe(df: pd.DataFrame) -> pd.DataFrame:
    """Coerce types, drop rows without timestamps and sort ascending."""
    if df.empty:
        return pd.DataFrame(columns=CANDLE_COLUMNS)

    normalized = df.copy()
    if "close_time" not in normalized.columns:
        normalized["close_time"] = np.nan

    normalized["timestamp"] = pd.to_numeric(normalized["timestamp"], errors="coerce")
    normalized["close_time"] = pd.to_numeric(normalized["close_time"], errors="coerce")
    for col in PRICE_COLUMNS:
        normalized[col] = pd.to_numeric(normalized[col], errors="coerce").fillna(0.0).astype(float)

    normalized.dropna(subset=["timestamp"], inplace=True)
    normalized["timestamp"] = normalized["timestamp"].astype(np.int64)
    normalized["close_time"] = normalized["close_time"].fillna(normalized["timestamp"]).astype(np.int64)
    normalized.sort_values("timestamp", inplace=True)
    normalized.reset_index(drop=True, inplace=True)
    return normalized[CANDLE_COLUMNS]


def frame_to_candles(df: pd.DataFrame) -> List[Candle]:
    """Convert a normalised frame into candles, oldest first."""
    return [
        Candle(
            open_time=int(row.timestamp),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
            close_time=int(row.close_time),
        )
        for row in df.itertuples(index=False)
    ]


def klines_to_candles(rows: Sequence[Sequence[Any]], columns: Sequence[str] = KLINE_COLUMNS) -> List[Candle]:
    return frame_to_candles(klines_to_frame(rows, columns))


def load_candles_csv(path: Any) -> List[Candle]:
    """Load candles from a CSV export with at least OHLCV and timestamp columns.

    ``open_time`` is accepted as an alias of ``timestamp``.
    """
    df = pd.read_csv(path)
    if "timestamp" not in df.columns and "open_time" in df.columns:
        df = df.rename(columns={"open_time": "timestamp"})
    missing = [col for col in ("timestamp",) + PRICE_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"CSV {path} is missing columns: {', '.join(missing)}")
    return frame_to_candles(normalize_kline_dataframe(df))
