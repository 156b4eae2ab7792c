"""Small numeric helpers shared by the scoring and index calculations."""

import math


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    return max(lower, min(upper, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from −∞ (2.5 → 3, −2.5 → −2)."""
    return int(math.floor(value + 0.5))
