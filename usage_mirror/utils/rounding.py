"""Half-up rounding helpers shared by every scorer.

Python's built-in ``round`` uses banker's rounding (``round(42.5) == 42``);
the scoring tables are defined against half-up rounding (``42.5 -> 43``).
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return int(math.floor(value + 0.5))


def round2(value: float) -> float:
    """Round to two decimal places, halves towards +infinity."""
    return math.floor(value * 100 + 0.5) / 100


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))
