"""Console output: status lines and framed per-file blocks.

Everything goes to stderr.  Detects ``NO_COLOR`` / ``TERM`` for safe fallback.

A framed block looks like::

    |
    |  ~ about.md
    |  + images/logo.png
    |
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prowl._types import ChangeKind


# ---------------------------------------------------------------------------
# ANSI helpers: respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""


def green(text: str) -> str:
    return f"{_GREEN}{text}{_RESET}"


def yellow(text: str) -> str:
    return f"{_YELLOW}{text}{_RESET}"


def red(text: str) -> str:
    return f"{_RED}{text}{_RESET}"


# ---------------------------------------------------------------------------
# Change markers
# ---------------------------------------------------------------------------

_MARKERS: dict[str, tuple[str, str]] = {
    "added": (_GREEN, "+"),
    "modified": (_YELLOW, "~"),
    "removed": (_RED, "x"),
}


def marker(kind: ChangeKind) -> str:
    """Return the styled ``  <m> `` marker for a change kind."""
    color, symbol = _MARKERS[kind]
    return f"{color}  {symbol} {_RESET}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def info(message: str) -> None:
    print(f"{_CYAN}{_BOLD}INFO{_RESET} - {message}", file=sys.stderr)


def warning(message: str) -> None:
    print(f"{_YELLOW}{_BOLD}WARNING{_RESET} - {message}", file=sys.stderr)


def error(message: str) -> None:
    print(f"{_RED}{_BOLD}ERROR{_RESET} - {message}", file=sys.stderr)


def display_line(text: str = "") -> None:
    """Print one framed row; an empty *text* prints the spacer row."""
    print(f"|{text}" if text else "| ", file=sys.stderr)


def display_block(lines: Iterable[str]) -> None:
    """Print *lines* inside a ``|`` frame with a blank spacer row on each side."""
    rows = ["| ", *(f"|{line}" for line in lines), "| "]
    print("\n".join(rows), file=sys.stderr)
