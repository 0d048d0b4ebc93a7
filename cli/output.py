"""
Output helpers for the CLI.
"""
from __future__ import annotations

import json
import sys

from colorama import Fore, Style

from display.formatters import format_price_changes, format_snapshot
from market.models import Snapshot


def render_snapshot(snapshot: Snapshot, as_json: bool = False) -> str:
    """Return the snapshot as a text report or as indented JSON."""
    if as_json:
        return json.dumps(snapshot.to_dict(), indent=2)
    header = f"{Style.BRIGHT}{format_price_changes(snapshot)}{Style.RESET_ALL}"
    return f"{header}\n\n{format_snapshot(snapshot)}".rstrip("\n")


def print_snapshot(snapshot: Snapshot, as_json: bool = False) -> None:
    print(render_snapshot(snapshot, as_json))


def print_error(message: str) -> None:
    """Print error message to stderr and exit with code 1.

    Args:
        message: Error message to display.
    """
    print(f"{Fore.RED}Error: {message}{Style.RESET_ALL}", file=sys.stderr)
    sys.exit(1)
