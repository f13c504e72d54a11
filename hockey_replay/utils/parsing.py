"""
Generic, format-agnostic parsing utilities.

Feed records from different eras disagree on types (ids as strings or
ints, missing clocks), so every helper here returns None instead of
raising on bad input.
"""

from __future__ import annotations

import re

_CLOCK_PATTERN = re.compile(r"(\d+):(\d+)")


def parse_int(value: str | int | float | None) -> int | None:
    """Parse a value to an integer, handling common edge cases.

    Accepts strings, ints, floats, or None. Returns None for empty strings or "-".
    """
    if value in (None, "", "-"):
        return None
    try:
        return int(float(value))
    except (ValueError, TypeError):
        return None


def parse_clock_seconds(value: str | None) -> int | None:
    """Parse an "MM:SS" clock string into whole seconds."""
    if not isinstance(value, str):
        return None
    match = _CLOCK_PATTERN.search(value)
    if not match:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def format_clock(seconds: int) -> str:
    """Format whole seconds as M:SS."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"
