"""
Rounding helpers.

Scores are published alongside figures computed by the web front end, so
ties must break the same way: half up for whole percentages and tenths,
half away from zero for fixed-decimal summary values.
"""

import math
from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity."""
    return int(math.floor(value + 0.5))


def round_tenth(value: float) -> float:
    """Round to one decimal place, ties toward positive infinity."""
    return math.floor(value * 10 + 0.5) / 10


def to_fixed(value: float, digits: int) -> float:
    """Round the exact binary value to `digits` decimals, ties away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
