"""Display layer for snapshot reports."""
from display.formatters import (
    format_series,
    format_snapshot,
    format_price_changes,
)

__all__ = [
    "format_series",
    "format_snapshot",
    "format_price_changes",
]
