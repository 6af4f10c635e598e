"""Rounding, dispersion, and correlation helpers shared by the engine.

All helpers accept sequences that may contain ``None`` (unmeasured values)
and ignore them. Empty or too-small inputs yield ``None`` instead of raising.
"""

from __future__ import annotations

import math
from statistics import stdev
from typing import Iterable, Optional, Sequence


def measured(values: Iterable[Optional[float]]) -> list[float]:
    """Drop missing values, keeping order."""
    return [float(v) for v in values if v is not None]


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def round_half_up(value: float) -> int:
    """Integer rounding where .5 always goes up (score semantics, not banker's)."""
    return int(math.floor(value + 0.5))


def round1(value: float) -> float:
    """One-decimal rounding where .05 always goes up."""
    return math.floor(value * 10 + 0.5) / 10


def sample_std(values: Iterable[Optional[float]]) -> Optional[float]:
    """Sample standard deviation (n - 1); needs at least two measured values."""
    numbers = measured(values)
    if len(numbers) < 2:
        return None
    return stdev(numbers)


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> Optional[float]:
    """Pearson r over paired values.

    Undefined (``None``) with fewer than 3 pairs, mismatched lengths, or zero
    variance on either axis.
    """
    if len(x) < 3 or len(x) != len(y):
        return None
    mean_x = sum(x) / len(x)
    mean_y = sum(y) / len(y)
    numerator = 0.0
    denom_x = 0.0
    denom_y = 0.0
    for xi, yi in zip(x, y):
        dx = xi - mean_x
        dy = yi - mean_y
        numerator += dx * dy
        denom_x += dx * dx
        denom_y += dy * dy
    if denom_x == 0 or denom_y == 0:
        return None
    return numerator / math.sqrt(denom_x * denom_y)
