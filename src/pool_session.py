"""
Pool Session

Single place that holds the loaded series and the range controller, and
answers the questions the UI asks: liquidity in range, fee summary,
estimate for a deposit.

Each series (hourly / daily / ticks) loads independently and in any order.
A load result carries the request id it was started with; a result older
than the last one applied for the same series is ignored.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from config import get_timeframe
from src.math.estimate import EstimateResult, estimate_returns
from src.math.fees import FeeRecord, FeeSummary, summarize_fees
from src.math.liquidity import LiquidityTick, aggregate_liquidity, normalize_range
from src.range_controller import BoundsListener, RangeBounds, RangeBoundsController
from src.series import PricePoint, latest_price, select_window

logger = logging.getLogger(__name__)

SERIES_NAMES = ("hourly", "daily", "ticks")


class PoolSession:
    """
    Loaded pool data + the selected range.

    Usage:
        session = PoolSession()
        rid = session.begin_load("ticks")
        session.apply_ticks(rid, ticks)
        session.liquidity_in_range()
        session.calculate(1000.0)
    """

    def __init__(self, controller: Optional[RangeBoundsController] = None):
        self.controller = controller or RangeBoundsController()

        self.hourly: Optional[List[PricePoint]] = None
        self.daily_prices: Optional[List[PricePoint]] = None
        self.fees: Optional[List[FeeRecord]] = None
        self.ticks: Optional[List[LiquidityTick]] = None
        self.fee_summary: FeeSummary = FeeSummary.empty()
        self.load_error: Optional[str] = None

        self._issued: Dict[str, int] = {name: 0 for name in SERIES_NAMES}
        self._applied: Dict[str, int] = {name: 0 for name in SERIES_NAMES}

    # ============================================================
    # LOADING
    # ============================================================

    def begin_load(self, series: str) -> int:
        """Issue the next request id for a series."""
        self._check_series(series)
        self._issued[series] += 1
        return self._issued[series]

    def _accept(self, series: str, request_id: int) -> bool:
        self._check_series(series)
        if request_id < self._applied[series]:
            logger.debug(
                f"[Session] Ignoring stale {series} result "
                f"(request {request_id} < {self._applied[series]})"
            )
            return False
        self._applied[series] = request_id
        return True

    @staticmethod
    def _check_series(series: str):
        if series not in SERIES_NAMES:
            raise ValueError(f"Unknown series: {series}")

    def apply_hourly(self, request_id: int, points: Sequence[PricePoint]) -> bool:
        """Replace the hourly series; seeds the bounds on the first load."""
        if not self._accept("hourly", request_id):
            return False
        self.hourly = list(points)
        logger.info(f"[Session] Hourly prices: {len(self.hourly)} points")
        self.controller.seed_from_price(self.current_price)
        return True

    def apply_daily(
        self,
        request_id: int,
        prices: Sequence[PricePoint],
        fees: Sequence[FeeRecord]
    ) -> bool:
        """Replace daily prices and fees; recomputes the fee summary."""
        if not self._accept("daily", request_id):
            return False
        self.daily_prices = list(prices)
        self.fees = list(fees)
        self.fee_summary = summarize_fees(self.fees)
        logger.info(f"[Session] Daily data: {len(self.daily_prices)} prices, {len(self.fees)} fee records")
        return True

    def apply_ticks(self, request_id: int, ticks: Sequence[LiquidityTick]) -> bool:
        """Replace the tick snapshot."""
        if not self._accept("ticks", request_id):
            return False
        self.ticks = list(ticks)
        logger.info(f"[Session] Ticks: {len(self.ticks)}")
        return True

    def report_error(self, series: str, message: str, request_id: Optional[int] = None) -> bool:
        """
        Keep the first load error for display; later ones are only logged.

        A failure from a request older than the last applied result of the
        same series is ignored. Returns True if the failure was recorded.
        """
        if request_id is not None:
            self._check_series(series)
            if request_id < self._applied[series]:
                logger.debug(
                    f"[Session] Ignoring stale {series} failure "
                    f"(request {request_id} < {self._applied[series]})"
                )
                return False
        logger.error(f"[Session] {series} load failed: {message}")
        if not self.load_error:
            self.load_error = message
        return True

    def clear_error(self):
        self.load_error = None

    # ============================================================
    # DERIVED VALUES
    # ============================================================

    @property
    def current_price(self) -> Optional[float]:
        return latest_price(self.hourly)

    def active_series(self, timeframe_id: str) -> List[PricePoint]:
        """Price window shown on the chart for a timeframe."""
        return select_window(get_timeframe(timeframe_id), self.hourly, self.daily_prices)

    def liquidity_in_range(self) -> Optional[float]:
        """Liquidity overlapping the current bounds; None until ticks load."""
        if self.ticks is None:
            return None
        return self.aggregate(self.ticks, self.get_bounds())

    def calculate(self, deposit: Optional[float]) -> EstimateResult:
        """Estimate for a deposit from the current bounds and fee history."""
        return self.estimate(deposit, self.liquidity_in_range(), self.fee_summary.last_7d)

    # ============================================================
    # OPERATIONS
    # ============================================================

    def get_bounds(self) -> RangeBounds:
        return self.controller.get_bounds()

    def set_bounds(self, lower: Optional[float] = None, upper: Optional[float] = None) -> RangeBounds:
        return self.controller.set_bounds(lower=lower, upper=upper)

    def on_bounds_changed(self, listener: BoundsListener) -> Callable[[], None]:
        return self.controller.on_bounds_changed(listener)

    def reset_bounds(self, current_price: Optional[float] = None) -> bool:
        """Reset to -/+5% of current_price (defaults to the latest hourly price)."""
        if current_price is None:
            current_price = self.current_price
        return self.controller.reset_bounds(current_price)

    @staticmethod
    def aggregate(ticks: Sequence[LiquidityTick], bounds: RangeBounds) -> Optional[float]:
        lo, hi = normalize_range(bounds.lower, bounds.upper)
        return aggregate_liquidity(ticks, lo, hi)

    @staticmethod
    def estimate(
        deposit: Optional[float],
        liquidity: Optional[float],
        fees_7d: Optional[float]
    ) -> EstimateResult:
        return estimate_returns(deposit, liquidity, fees_7d)

    @staticmethod
    def summarize_fees(records: Sequence[FeeRecord]) -> FeeSummary:
        return summarize_fees(records)
