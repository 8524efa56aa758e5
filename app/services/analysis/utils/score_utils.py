"""
Score utility functions.
Rounding and averaging helpers shared by the page and site scorers.
"""

import math
from typing import Iterable

def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round halves away from zero for positive values (2.5 -> 3), unlike round().
    :param value: raw value
    :param digits: number of decimals to keep
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor

def round_score(value: float) -> int:
    """Round a score to the nearest integer, halves up."""
    return int(round_half_up(value))

def percentage(part: int, total: int) -> int:
    """Integer percentage of part over total, 0 when total is 0."""
    if total <= 0:
        return 0
    return round_score(part / total * 100)

def average(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)
