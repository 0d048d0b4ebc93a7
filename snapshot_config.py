from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from market.intervals import DEFAULT_LONG_TERM_LIMIT, DEFAULT_SCAN_INTERVAL_MINUTES
from market.symbols import DEFAULT_QUOTE_ASSET


EARLY_ENV_WARNINGS: List[str] = []

SUPPORTED_BACKENDS = {"binance", "ccxt"}
DEFAULT_CCXT_EXCHANGE_ID = "binanceusdm"
DEFAULT_REQUEST_TIMEOUT = 10.0


def load_env_file(path: Optional[Path] = None) -> bool:
    """Load a .env file into the process environment without overriding it."""
    if path is None:
        return load_dotenv()
    return load_dotenv(dotenv_path=path)


def _parse_float_env(value: Optional[str], *, default: float) -> float:
    """Convert environment string to float with fallback and logging."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        EARLY_ENV_WARNINGS.append(
            f"Invalid float environment value '{value}'; using default {default:.2f}"
        )
        return default


def _parse_int_env(value: Optional[str], *, default: int) -> int:
    """Convert environment string to int with fallback and logging."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        EARLY_ENV_WARNINGS.append(
            f"Invalid int environment value '{value}'; using default {default}"
        )
        return default


def _parse_str_env(value: Optional[str], *, default: str) -> str:
    if value is None:
        return default
    stripped = value.strip()
    return stripped or default


def emit_early_env_warnings() -> None:
    """Log and clear any configuration warnings collected while loading."""
    global EARLY_ENV_WARNINGS
    for msg in EARLY_ENV_WARNINGS:
        logging.warning(msg)
    EARLY_ENV_WARNINGS = []


@dataclass
class SnapshotConfig:
    market_data_backend: str
    ccxt_exchange_id: str
    api_key: str
    api_secret: str
    scan_interval_minutes: int
    long_term_limit: int
    quote_asset: str
    request_timeout: float


def load_snapshot_config_from_env() -> SnapshotConfig:
    raw_backend = os.getenv("MARKET_DATA_BACKEND")
    market_data_backend = _parse_str_env(raw_backend, default="binance").lower()
    if market_data_backend not in SUPPORTED_BACKENDS:
        EARLY_ENV_WARNINGS.append(
            f"Unsupported MARKET_DATA_BACKEND '{raw_backend}'; using 'binance'."
        )
        market_data_backend = "binance"

    scan_interval_minutes = _parse_int_env(
        os.getenv("SNAPSHOT_SCAN_INTERVAL_MINUTES"),
        default=DEFAULT_SCAN_INTERVAL_MINUTES,
    )
    if scan_interval_minutes <= 0:
        EARLY_ENV_WARNINGS.append(
            f"SNAPSHOT_SCAN_INTERVAL_MINUTES must be positive; using {DEFAULT_SCAN_INTERVAL_MINUTES}."
        )
        scan_interval_minutes = DEFAULT_SCAN_INTERVAL_MINUTES

    long_term_limit = _parse_int_env(
        os.getenv("SNAPSHOT_LONG_TERM_LIMIT"),
        default=DEFAULT_LONG_TERM_LIMIT,
    )
    if long_term_limit < 2:
        EARLY_ENV_WARNINGS.append(
            f"SNAPSHOT_LONG_TERM_LIMIT must be at least 2; using {DEFAULT_LONG_TERM_LIMIT}."
        )
        long_term_limit = DEFAULT_LONG_TERM_LIMIT

    request_timeout = _parse_float_env(
        os.getenv("SNAPSHOT_REQUEST_TIMEOUT"),
        default=DEFAULT_REQUEST_TIMEOUT,
    )

    return SnapshotConfig(
        market_data_backend=market_data_backend,
        ccxt_exchange_id=_parse_str_env(os.getenv("CCXT_EXCHANGE_ID"), default=DEFAULT_CCXT_EXCHANGE_ID),
        api_key=_parse_str_env(os.getenv("BINANCE_API_KEY"), default=""),
        api_secret=_parse_str_env(os.getenv("BINANCE_API_SECRET"), default=""),
        scan_interval_minutes=scan_interval_minutes,
        long_term_limit=long_term_limit,
        quote_asset=_parse_str_env(os.getenv("SNAPSHOT_QUOTE_ASSET"), default=DEFAULT_QUOTE_ASSET).upper(),
        request_timeout=request_timeout,
    )
