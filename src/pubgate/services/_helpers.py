"""Shared service-layer helper functions."""

from __future__ import annotations

import math
from datetime import UTC, datetime


def today_iso() -> str:
    """Today's date as YYYY-MM-DD."""
    return datetime.now(UTC).strftime("%Y-%m-%d")


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (report timestamps)."""
    return datetime.now(UTC).isoformat()


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up.

    Examples:
        >>> round_half_up(84.5)
        85
        >>> round_half_up(84.49)
        84
    """
    return math.floor(value + 0.5)
