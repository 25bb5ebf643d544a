"""
Running statistics for a single key.
Accumulates at full precision; rounding happens only when formatting.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple


def round_half_away(value: float) -> float:
    """Round to one fractional digit, ties away from zero (0.25 -> 0.3, -0.25 -> -0.3)"""
    if not math.isfinite(value * 10):
        # Too large to carry a fractional digit; nothing to round
        return value
    scaled = Decimal(value * 10).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    # + 0.0 turns a rounded -0.0 into 0.0
    return float(scaled) / 10 + 0.0


def format_value(value: float) -> str:
    """Display form of one statistic. A sum that overflowed prints as Infinity."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return f"{round_half_away(value):.1f}"


@dataclass
class RunningStats:
    """Min, max, sum and count of the values seen for one key"""
    min: float = math.inf
    max: float = -math.inf
    total: float = 0.0
    count: int = 0

    def observe(self, value: float):
        """Include one value"""
        if value < self.min:
            self.min = value
        if value > self.max:
            self.max = value
        self.total += value
        self.count += 1

    def merge(self, other: 'RunningStats') -> 'RunningStats':
        """Fold another accumulator into this one and return self"""
        if other.min < self.min:
            self.min = other.min
        if other.max > self.max:
            self.max = other.max
        self.total += other.total
        self.count += other.count
        return self

    def mean(self) -> float:
        if self.count == 0:
            raise ValueError("mean() of an empty RunningStats")
        return self.total / self.count

    def copy(self) -> 'RunningStats':
        return RunningStats(self.min, self.max, self.total, self.count)

    def formatted(self) -> Tuple[str, str, str]:
        """(min, mean, max) rounded for display, one fractional digit each"""
        return tuple(format_value(v) for v in (self.min, self.mean(), self.max))

    def format(self) -> str:
        """Render as 'min/mean/max'"""
        return "/".join(self.formatted())

    def __str__(self) -> str:
        return self.format()
