"""Symbol normalisation for USDT-margined perpetual contracts."""
from __future__ import annotations

DEFAULT_QUOTE_ASSET = "USDT"


def normalize_symbol(symbol: str, quote_asset: str = DEFAULT_QUOTE_ASSET) -> str:
    """Uppercase ``symbol`` and append the quote asset when it is missing.

    Examples:
        btc -> BTCUSDT
        ethusdt -> ETHUSDT
    """
    upper = symbol.strip().upper()
    quote = quote_asset.strip().upper()
    if upper.endswith(quote):
        return upper
    return upper + quote


def to_ccxt_symbol(symbol: str, quote_asset: str = DEFAULT_QUOTE_ASSET) -> str:
    """Convert a raw exchange symbol to ccxt unified swap notation.

    BTCUSDT -> BTC/USDT:USDT. Symbols already containing "/" pass through.
    """
    if "/" in symbol:
        return symbol
    normalized = normalize_symbol(symbol, quote_asset)
    quote = quote_asset.strip().upper()
    base = normalized[: -len(quote)]
    return f"{base}/{quote}:{quote}"
