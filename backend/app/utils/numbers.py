"""Numeric helpers shared by the geo, matching and filter modules"""

import math
from typing import Any


def is_number(value: Any) -> bool:
    """Finite int/float (bool excluded)"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3, not 2)"""
    return int(math.floor(value + 0.5))
