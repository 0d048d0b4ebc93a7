"""Tests for analysis/series.py module."""
from analysis.indicators import calculate_atr, calculate_ema, calculate_macd, calculate_rsi
from analysis.series import (
    TRAILING_WINDOW,
    atr_series,
    ema_series,
    macd_series,
    mid_price_series,
    rsi_series,
    sample_series,
)
from market.models import Candle


def _candles(closes):
    return [
        Candle(
            open_time=i * 180_000,
            open=c,
            high=c + 1.0,
            low=c - 1.0,
            close=c,
            volume=10.0 + i,
            close_time=(i + 1) * 180_000 - 1,
        )
        for i, c in enumerate(closes)
    ]


def _wavy(count):
    return _candles([100.0 + ((i * 7) % 13) - 0.5 * (i % 4) for i in range(count)])


class TestSampleSeries:
    def test_short_window_below_min_period_is_empty(self):
        candles = _wavy(5)
        assert ema_series(candles, 20) == ()
        assert sample_series(candles, lambda prefix: 1.0, 20) == ()

    def test_points_are_prefix_recomputations(self):
        candles = _wavy(30)
        values = ema_series(candles, 20)

        assert len(values) == TRAILING_WINDOW
        expected = tuple(calculate_ema(candles[: i + 1], 20) for i in range(20, 30))
        assert values == expected
        assert values[-1] == calculate_ema(candles, 20)

    def test_gates_each_indicator_on_its_own_minimum(self):
        candles = _wavy(30)
        # window covers indices 20..29
        assert len(macd_series(candles)) == 5  # i >= 25
        assert len(rsi_series(candles, 7)) == 10
        assert len(rsi_series(candles, 14)) == 10

        short = _wavy(12)
        # window covers indices 2..11
        assert len(mid_price_series(short)) == 10
        assert ema_series(short, 20) == ()
        assert len(rsi_series(short, 7)) == 5  # i >= 7
        assert rsi_series(short, 14) == ()
        assert macd_series(short) == ()

    def test_macd_and_rsi_tail_match_full_sequence(self):
        candles = _wavy(45)
        assert macd_series(candles)[-1] == calculate_macd(candles)
        assert rsi_series(candles, 14)[-1] == calculate_rsi(candles, 14)

    def test_atr_series_gate(self):
        candles = _wavy(12)
        values = atr_series(candles, 3)
        assert len(values) == 9  # window 2..11, ATR(3) needs i >= 3
        assert values[-1] == calculate_atr(candles, 3)
        assert len(atr_series(candles, 14)) == 0


class TestMidPriceSeries:
    def test_returns_last_ten_closes(self):
        candles = _candles([float(v) for v in range(1, 16)])
        assert mid_price_series(candles) == tuple(float(v) for v in range(6, 16))

    def test_short_sequence_fully_populated(self):
        candles = _candles([3.0, 4.0])
        assert mid_price_series(candles) == (3.0, 4.0)

    def test_empty(self):
        assert mid_price_series([]) == ()
