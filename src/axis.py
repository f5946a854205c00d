"""
Vertical value axis of the price chart.

Maps prices to widget pixels and back. Higher values are drawn higher,
i.e. at smaller y. Supports wheel zoom in y mode.
"""

import logging
import math
from typing import Iterable, Optional, Tuple

from config import BOUNDS_PAD_FRAC, DATA_PAD_FRAC

logger = logging.getLogger(__name__)

YRange = Tuple[Optional[float], Optional[float]]


def compute_y_range(values: Iterable[Optional[float]], pad_frac: float = DATA_PAD_FRAC) -> YRange:
    """
    Padded (min, max) of the finite values.

    A single distinct value is padded by max(1, |v| * 1%) on each side.

    Returns:
        (min, max), or (None, None) if there are no finite values
    """
    finite = [v for v in values if v is not None and math.isfinite(v)]
    if not finite:
        return None, None

    lo, hi = min(finite), max(finite)
    if hi == lo:
        pad = max(1.0, abs(hi) * 0.01)
        return lo - pad, hi + pad

    pad = (hi - lo) * pad_frac
    return lo - pad, hi + pad


def chart_y_range(prices: Iterable[float], lower: float, upper: float) -> YRange:
    """Padded data range widened so both bounds stay on screen."""
    data_min, data_max = compute_y_range(prices, DATA_PAD_FRAC)
    return compute_y_range([data_min, data_max, lower, upper], BOUNDS_PAD_FRAC)


class ValueAxis:
    """
    Linear y axis between pixel_top and pixel_bottom.

    min/max report the zoom range while zoomed, the data range otherwise.
    """

    def __init__(self, pixel_top: float = 0.0, pixel_bottom: float = 1.0):
        self.pixel_top = pixel_top
        self.pixel_bottom = pixel_bottom
        self._data_min: Optional[float] = None
        self._data_max: Optional[float] = None
        self._zoom: Optional[Tuple[float, float]] = None

    # ---- range ----

    @property
    def min(self) -> Optional[float]:
        return self._zoom[0] if self._zoom else self._data_min

    @property
    def max(self) -> Optional[float]:
        return self._zoom[1] if self._zoom else self._data_max

    @property
    def is_zoomed(self) -> bool:
        return self._zoom is not None

    @property
    def has_range(self) -> bool:
        return self.min is not None and self.max is not None and self.max > self.min

    def set_data_range(self, y_min: Optional[float], y_max: Optional[float]):
        """Set the unzoomed range (None, None clears it)."""
        if y_min is not None and y_max is not None and y_min > y_max:
            y_min, y_max = y_max, y_min
        self._data_min = y_min
        self._data_max = y_max

    def set_pixel_span(self, pixel_top: float, pixel_bottom: float):
        self.pixel_top = pixel_top
        self.pixel_bottom = pixel_bottom

    def contains_pixel(self, y: float) -> bool:
        return self.pixel_top <= y <= self.pixel_bottom

    # ---- mapping ----

    def value_for_pixel(self, y: float) -> float:
        if not self.has_range:
            return math.nan
        height = self.pixel_bottom - self.pixel_top
        if height <= 0:
            return math.nan
        frac = (self.pixel_bottom - y) / height
        return self.min + frac * (self.max - self.min)

    def pixel_for_value(self, value: float) -> float:
        if not self.has_range:
            return math.nan
        frac = (value - self.min) / (self.max - self.min)
        return self.pixel_bottom - frac * (self.pixel_bottom - self.pixel_top)

    # ---- zoom ----

    def zoom(self, factor: float, center_value: Optional[float] = None):
        """
        Scale the visible range around center_value.

        factor > 1 zooms in, factor < 1 zooms out.
        """
        if not self.has_range or factor <= 0 or not math.isfinite(factor):
            return
        lo, hi = self.min, self.max
        if center_value is None or not math.isfinite(center_value):
            center_value = (lo + hi) / 2

        new_lo = center_value - (center_value - lo) / factor
        new_hi = center_value + (hi - center_value) / factor
        if new_hi <= new_lo:
            return
        self._zoom = (new_lo, new_hi)
        logger.debug(f"[Axis] Zoom {factor:.3f} -> [{new_lo:.4f}, {new_hi:.4f}]")

    def reset_zoom(self):
        self._zoom = None
