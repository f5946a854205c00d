"""
Trailing fee sums over the daily fee series.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

SUMMARY_WINDOWS = (1, 7, 30)


@dataclass(frozen=True)
class FeeRecord:
    """Комиссии пула за один период (день)."""
    timestamp: int       # Unix seconds, period start
    fees_usd: float


@dataclass(frozen=True)
class FeeSummary:
    """Суммы комиссий за последние 1/7/30 периодов. None = нет данных."""
    last_1d: Optional[float]
    last_7d: Optional[float]
    last_30d: Optional[float]

    @classmethod
    def empty(cls) -> "FeeSummary":
        return cls(last_1d=None, last_7d=None, last_30d=None)


def sum_last_n(records: Sequence[FeeRecord], n: int) -> Optional[float]:
    """
    Sum fees of the trailing n records by position.

    Fewer than n records sums everything available.
    """
    if not records or n <= 0:
        return None
    total = sum(r.fees_usd for r in records[-n:])
    return total if math.isfinite(total) else None


def summarize_fees(records: Sequence[FeeRecord]) -> FeeSummary:
    """
    Reduce a fee series to last 1/7/30 period sums.

    Args:
        records: Fee records sorted ascending by timestamp

    Returns:
        FeeSummary (all fields None for an empty series)
    """
    if not records:
        return FeeSummary.empty()

    last_1d, last_7d, last_30d = (sum_last_n(records, n) for n in SUMMARY_WINDOWS)
    return FeeSummary(last_1d=last_1d, last_7d=last_7d, last_30d=last_30d)
