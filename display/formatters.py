"""Plain-text rendering of market snapshots.

This module turns a :class:`~market.models.Snapshot` into the multi-paragraph
report used in prompts and on the console.
"""
from __future__ import annotations

from typing import Iterable, List

from market.models import Snapshot

DEFAULT_INTERVAL_LABEL = "3m"


def format_series(values: Iterable[float]) -> str:
    """Render values as ``[1.000, 2.000]`` with 3 decimals."""
    return "[" + ", ".join(f"{value:.3f}" for value in values) + "]"


def format_snapshot(snapshot: Snapshot) -> str:
    """Render the snapshot report.

    Empty series are skipped. Paragraphs are separated by blank lines.
    """
    lines: List[str] = []

    lines.append(
        f"current_price = {snapshot.current_price:.2f}, "
        f"current_ema20 = {snapshot.current_ema20:.3f}, "
        f"current_macd = {snapshot.current_macd:.3f}, "
        f"current_rsi (7 period) = {snapshot.current_rsi7:.3f}"
    )
    lines.append(
        f"In addition, here is the latest {snapshot.symbol} open interest and funding rate for perps:"
    )
    lines.append(
        f"Open Interest: Latest: {snapshot.open_interest.latest:.2f} "
        f"Average: {snapshot.open_interest.average:.2f}"
    )
    lines.append(f"Funding Rate: {snapshot.funding_rate:.2e}")

    intraday = snapshot.intraday_series
    interval = intraday.interval or DEFAULT_INTERVAL_LABEL
    lines.append(f"Intraday series ({interval} intervals, oldest → latest):")
    for label, values in (
        ("Mid prices", intraday.mid_prices),
        ("EMA indicators (20-period)", intraday.ema20_values),
        ("MACD indicators", intraday.macd_values),
        ("RSI indicators (7-Period)", intraday.rsi7_values),
        ("RSI indicators (14-Period)", intraday.rsi14_values),
    ):
        if values:
            lines.append(f"{label}: {format_series(values)}")

    context = snapshot.longer_term_context
    lines.append("Longer-term context (4-hour timeframe):")
    lines.append(f"20-Period EMA: {context.ema20:.3f} vs. 50-Period EMA: {context.ema50:.3f}")
    lines.append(f"3-Period ATR: {context.atr3:.3f} vs. 14-Period ATR: {context.atr14:.3f}")
    lines.append(
        f"Current Volume: {context.current_volume:.3f} vs. Average Volume: {context.average_volume:.3f}"
    )
    if context.macd_values:
        lines.append(f"MACD indicators: {format_series(context.macd_values)}")
    if context.rsi14_values:
        lines.append(f"RSI indicators (14-Period): {format_series(context.rsi14_values)}")

    return "".join(f"{line}\n\n" for line in lines)


def format_price_changes(snapshot: Snapshot) -> str:
    """One-line summary of the interval-relative price changes."""
    return (
        f"{snapshot.symbol}: 1h {snapshot.price_change_1h:+.2f}% | "
        f"4h {snapshot.price_change_4h:+.2f}%"
    )
