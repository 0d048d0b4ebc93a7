"""Tests for display/formatters.py module."""
from display.formatters import format_price_changes, format_series, format_snapshot
from market.models import IntradaySeries, LongerTermContext, OpenInterest, Snapshot


def _snapshot(**overrides):
    fields = dict(
        symbol="BTCUSDT",
        current_price=64321.25,
        price_change_1h=1.2345,
        price_change_4h=-0.5,
        current_ema20=64000.12345,
        current_macd=-12.3456,
        current_rsi7=55.5556,
        open_interest=OpenInterest(1000.0, 999.0),
        funding_rate=0.0001234,
        intraday_series=IntradaySeries(
            interval="5m",
            mid_prices=(1.0, 2.0),
            ema20_values=(1.23456,),
            macd_values=(),
            rsi7_values=(50.0,),
            rsi14_values=(),
        ),
        longer_term_context=LongerTermContext(
            ema20=10.0,
            ema50=9.0,
            atr3=1.5,
            atr14=1.25,
            current_volume=100.0,
            average_volume=80.0,
            macd_values=(0.1, 0.2),
            rsi14_values=(),
        ),
    )
    fields.update(overrides)
    return Snapshot(**fields)


class TestFormatSeries:
    def test_three_decimals_bracketed(self):
        assert format_series([1, 2.34567]) == "[1.000, 2.346]"

    def test_empty(self):
        assert format_series([]) == "[]"


class TestFormatSnapshot:
    def test_headline_and_context_lines(self):
        report = format_snapshot(_snapshot())

        assert report.startswith(
            "current_price = 64321.25, current_ema20 = 64000.123, "
            "current_macd = -12.346, current_rsi (7 period) = 55.556\n\n"
        )
        assert "latest BTCUSDT open interest" in report
        assert "Open Interest: Latest: 1000.00 Average: 999.00" in report
        assert "Funding Rate: 1.23e-04" in report
        assert "Intraday series (5m intervals, oldest → latest):" in report
        assert "20-Period EMA: 10.000 vs. 50-Period EMA: 9.000" in report
        assert "3-Period ATR: 1.500 vs. 14-Period ATR: 1.250" in report
        assert "Current Volume: 100.000 vs. Average Volume: 80.000" in report

    def test_series_lines_skip_empty(self):
        report = format_snapshot(_snapshot())

        assert "Mid prices: [1.000, 2.000]" in report
        assert "EMA indicators (20-period): [1.235]" in report
        assert "RSI indicators (7-Period): [50.000]" in report
        # intraday MACD and both RSI14 series are empty
        assert report.count("MACD indicators:") == 1
        assert "MACD indicators: [0.100, 0.200]" in report
        assert "RSI indicators (14-Period)" not in report

    def test_blank_interval_falls_back_to_default(self):
        report = format_snapshot(_snapshot(intraday_series=IntradaySeries(interval="")))
        assert "Intraday series (3m intervals" in report


def test_format_price_changes():
    assert format_price_changes(_snapshot()) == "BTCUSDT: 1h +1.23% | 4h -0.50%"
