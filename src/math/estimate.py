"""
Fee / APR estimate for a deposit in the selected range.

Proportional-share model: a deposit earns the share deposit / L of the
fees the range collected last week.

- weekly = deposit / L * fees_last_7d
- daily  = weekly / 7
- APR(%) = fees_last_7d / L * 52 * 100   (same as weekly / deposit * 52 * 100)

APR does not depend on the deposit: it is the yield rate of the range.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
WEEKS_PER_YEAR = 52


@dataclass(frozen=True)
class EstimateResult:
    """Результат оценки. None = недоступно (не ноль)."""
    daily_fees_usd: Optional[float]
    weekly_fees_usd: Optional[float]
    apr_percent: Optional[float]

    @classmethod
    def unavailable(cls) -> "EstimateResult":
        return cls(daily_fees_usd=None, weekly_fees_usd=None, apr_percent=None)

    @property
    def available(self) -> bool:
        return (
            self.daily_fees_usd is not None
            and self.weekly_fees_usd is not None
            and self.apr_percent is not None
        )


def _is_finite(value) -> bool:
    return value is not None and math.isfinite(value)


def estimate_returns(
    deposit: Optional[float],
    liquidity_in_range: Optional[float],
    fees_last_7d: Optional[float]
) -> EstimateResult:
    """
    Estimate daily/weekly fees and APR for a deposit.

    An empty range, a zero deposit or missing fee history is a normal
    outcome and yields EstimateResult.unavailable() rather than an error.

    Args:
        deposit: Deposit in USD, must be > 0
        liquidity_in_range: Aggregated liquidity in USD, must be > 0
        fees_last_7d: Pool fees over the last 7 periods in USD, must be >= 0

    Returns:
        EstimateResult
    """
    if not _is_finite(deposit) or deposit <= 0:
        logger.debug(f"[Estimate] Unavailable: deposit={deposit}")
        return EstimateResult.unavailable()

    if not _is_finite(liquidity_in_range) or liquidity_in_range <= 0:
        logger.debug(f"[Estimate] Unavailable: liquidity={liquidity_in_range}")
        return EstimateResult.unavailable()

    if not _is_finite(fees_last_7d) or fees_last_7d < 0:
        logger.debug(f"[Estimate] Unavailable: fees_7d={fees_last_7d}")
        return EstimateResult.unavailable()

    weekly = (deposit / liquidity_in_range) * fees_last_7d
    daily = weekly / DAYS_PER_WEEK
    apr = (fees_last_7d / liquidity_in_range) * WEEKS_PER_YEAR * 100

    return EstimateResult(
        daily_fees_usd=daily,
        weekly_fees_usd=weekly,
        apr_percent=apr,
    )
