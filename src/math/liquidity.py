"""
Liquidity-in-range aggregation

Тик включается, если его ценовой интервал пересекает выбранный диапазон:
- interval = [min(price_lower, price_upper), max(price_lower, price_upper)]
- included  <=>  interval_high >= lower AND interval_low <= upper

Both intervals are closed, so a tick that only touches a bound counts.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class LiquidityTick:
    """Ценовой диапазон одного тика и ликвидность в USD."""
    price_lower: float   # Может быть больше price_upper (порядок из источника)
    price_upper: float
    usd_value: float     # Ликвидность в USD, >= 0

    @property
    def interval(self) -> Tuple[float, float]:
        """Normalized (low, high) price interval."""
        return normalize_range(self.price_lower, self.price_upper)


def normalize_range(a: float, b: float) -> Tuple[float, float]:
    """Return (lo, hi) regardless of argument order."""
    return min(a, b), max(a, b)


def tick_overlaps_range(tick: LiquidityTick, lower: float, upper: float) -> bool:
    """
    Check whether a tick's price interval overlaps the closed range [lower, upper].

    Args:
        tick: Liquidity tick (interval order does not matter)
        lower: Range lower bound (must be <= upper)
        upper: Range upper bound

    Returns:
        True if the intervals overlap or touch
    """
    if not math.isfinite(tick.price_lower) or not math.isfinite(tick.price_upper):
        return False

    low, high = tick.interval
    return high >= lower and low <= upper


def aggregate_liquidity(
    ticks: Iterable[LiquidityTick],
    lower: float,
    upper: float
) -> Optional[float]:
    """
    Суммарная ликвидность тиков, пересекающих диапазон [lower, upper].

    The caller is responsible for passing lower <= upper (see normalize_range);
    the range is not reordered here.

    Args:
        ticks: Liquidity ticks
        lower: Range lower bound
        upper: Range upper bound

    Returns:
        Sum of usd_value over overlapping ticks, 0.0 if none overlap,
        None if the bounds or the resulting sum are not finite
    """
    if not math.isfinite(lower) or not math.isfinite(upper):
        return None

    total = 0.0
    for tick in ticks:
        if tick_overlaps_range(tick, lower, upper):
            total += tick.usd_value

    if not math.isfinite(total):
        return None
    return total
