"""
Range Bounds Controller

Owns the two price bounds of the selected range and the drag gesture
that moves them over the chart's value axis.

States:
- Idle               pointer moves only update the hover cursor
- Dragging(which)    pointer moves update bound `which`

Invariant: lower <= upper after every operation. A bound dragged or typed
past the other one is clamped to the other bound's exact value.

The controller knows nothing about Qt: the chart widget forwards pointer
y pixels and supplies an axis that maps pixels to values.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol

from config import (
    BOUND_LOWER_FACTOR,
    BOUND_UPPER_FACTOR,
    DEFAULT_LOWER_BOUND,
    DEFAULT_UPPER_BOUND,
    DRAG_TOLERANCE_PX,
)

logger = logging.getLogger(__name__)


class BoundKind(Enum):
    UPPER = "Upper Bound"
    LOWER = "Lower Bound"


# Paint order of the bound lines: the last one is on top
DRAW_ORDER = (BoundKind.UPPER, BoundKind.LOWER)


@dataclass(frozen=True)
class RangeBounds:
    """Снимок границ диапазона. lower <= upper."""
    lower: float
    upper: float

    def value_of(self, which: BoundKind) -> float:
        return self.upper if which is BoundKind.UPPER else self.lower


@dataclass(frozen=True)
class CursorPosition:
    """Hover cursor inside the plot area."""
    y: float
    value: float


class AxisLike(Protocol):
    min: Optional[float]
    max: Optional[float]

    def value_for_pixel(self, y: float) -> float: ...

    def pixel_for_value(self, value: float) -> float: ...

    def contains_pixel(self, y: float) -> bool: ...

    def reset_zoom(self) -> None: ...


BoundsListener = Callable[[RangeBounds], None]


class RangeBoundsController:
    """
    State machine for the selected price range.

    Usage:
        controller = RangeBoundsController()
        controller.attach_axis(chart_axis)
        controller.on_bounds_changed(lambda b: print(b.lower, b.upper))

        controller.seed_from_price(3000.0)      # 2850 / 3150, once
        controller.pointer_down(y)              # grab a bound near y
        controller.pointer_move(y2)             # drag, published immediately
        controller.pointer_up()                 # back to idle
    """

    def __init__(
        self,
        lower: float = DEFAULT_LOWER_BOUND,
        upper: float = DEFAULT_UPPER_BOUND,
        tolerance_px: float = DRAG_TOLERANCE_PX,
        axis: Optional[AxisLike] = None
    ):
        lower, upper = min(lower, upper), max(lower, upper)
        self._bounds = RangeBounds(lower=lower, upper=upper)
        self._dragging: Optional[BoundKind] = None
        self._cursor: Optional[CursorPosition] = None
        self._seeded = False
        self.tolerance_px = tolerance_px
        self.axis = axis
        self._changed_listeners: List[BoundsListener] = []
        self._finished_listeners: List[BoundsListener] = []

    # ============================================================
    # STATE
    # ============================================================

    def get_bounds(self) -> RangeBounds:
        return self._bounds

    @property
    def state(self) -> Optional[BoundKind]:
        """Bound being dragged, None when idle."""
        return self._dragging

    @property
    def is_dragging(self) -> bool:
        return self._dragging is not None

    @property
    def cursor(self) -> Optional[CursorPosition]:
        return self._cursor

    @property
    def seeded(self) -> bool:
        return self._seeded

    def attach_axis(self, axis: Optional[AxisLike]):
        self.axis = axis

    # ============================================================
    # LISTENERS
    # ============================================================

    def on_bounds_changed(self, listener: BoundsListener) -> Callable[[], None]:
        """Subscribe to every bound update. Returns an unsubscribe callable."""
        self._changed_listeners.append(listener)
        return lambda: self._remove(self._changed_listeners, listener)

    def on_drag_finished(self, listener: BoundsListener) -> Callable[[], None]:
        """Subscribe to the end of a drag gesture. Returns an unsubscribe callable."""
        self._finished_listeners.append(listener)
        return lambda: self._remove(self._finished_listeners, listener)

    @staticmethod
    def _remove(listeners: List[BoundsListener], listener: BoundsListener):
        if listener in listeners:
            listeners.remove(listener)

    def _publish(self, bounds: RangeBounds):
        if bounds == self._bounds:
            return
        self._bounds = bounds
        for listener in list(self._changed_listeners):
            listener(bounds)

    # ============================================================
    # DIRECT INPUT
    # ============================================================

    def set_upper(self, value: float) -> bool:
        """Set upper from a typed value, clamped to >= current lower."""
        if value is None or not math.isfinite(value):
            return False
        bounds = self._bounds
        self._publish(RangeBounds(lower=bounds.lower, upper=max(value, bounds.lower)))
        return True

    def set_lower(self, value: float) -> bool:
        """Set lower from a typed value, clamped to <= current upper."""
        if value is None or not math.isfinite(value):
            return False
        bounds = self._bounds
        self._publish(RangeBounds(lower=min(value, bounds.upper), upper=bounds.upper))
        return True

    def set_bounds(self, lower: Optional[float] = None, upper: Optional[float] = None) -> RangeBounds:
        """
        Set one or both bounds from typed values.

        With both values the pair replaces the range at once, lower
        clamped to <= the new upper, so the range can move either way.
        """
        lower_ok = lower is not None and math.isfinite(lower)
        upper_ok = upper is not None and math.isfinite(upper)
        if lower_ok and upper_ok:
            self._publish(RangeBounds(lower=min(lower, upper), upper=upper))
            return self._bounds
        if upper is not None:
            self.set_upper(upper)
        if lower is not None:
            self.set_lower(lower)
        return self._bounds

    def seed_from_price(self, price: Optional[float]) -> bool:
        """
        Initial bounds at price -/+ 5% on the first successful price load.

        Only the first call with a valid price has an effect, so a later
        refresh does not move bounds the user already adjusted.
        """
        if self._seeded or price is None or not math.isfinite(price) or price <= 0:
            return False
        self._seeded = True
        logger.info(f"[Range] Seeding bounds around {price}")
        self._publish(self._bounds_around(price))
        return True

    def reset_bounds(self, current_price: Optional[float]) -> bool:
        """
        Reset bounds to current_price -/+ 5% and clear the axis zoom.

        No effect without a positive price.
        """
        if current_price is None or not math.isfinite(current_price) or current_price <= 0:
            return False
        self._dragging = None
        if self.axis is not None:
            self.axis.reset_zoom()
        self._publish(self._bounds_around(current_price))
        return True

    @staticmethod
    def _bounds_around(price: float) -> RangeBounds:
        return RangeBounds(
            lower=price * BOUND_LOWER_FACTOR,
            upper=price * BOUND_UPPER_FACTOR,
        )

    # ============================================================
    # POINTER EVENTS
    # ============================================================

    def hit_test(self, y: float) -> Optional[BoundKind]:
        """Bound rendered within tolerance of y; topmost wins."""
        if self.axis is None:
            return None
        for which in reversed(DRAW_ORDER):
            line_y = self.axis.pixel_for_value(self._bounds.value_of(which))
            if math.isfinite(line_y) and abs(y - line_y) < self.tolerance_px:
                return which
        return None

    def pointer_down(self, y: float) -> Optional[BoundKind]:
        """Idle -> Dragging(which) if a bound is under the pointer."""
        if self._dragging is not None or self.axis is None:
            return self._dragging
        if not self.axis.contains_pixel(y):
            return None

        which = self.hit_test(y)
        if which is not None:
            self._dragging = which
            self._cursor = None
            logger.debug(f"[Range] Drag start: {which.value}")
        return which

    def pointer_move(self, y: float):
        """Drag the grabbed bound, or track the hover cursor when idle."""
        if self.axis is None:
            return

        if self._dragging is None:
            if self.axis.contains_pixel(y):
                value = self.axis.value_for_pixel(y)
                self._cursor = CursorPosition(y=y, value=value) if math.isfinite(value) else None
            else:
                self._cursor = None
            return

        value = self.axis.value_for_pixel(y)
        if not math.isfinite(value):
            return
        axis_min = self.axis.min if self.axis.min is not None else value
        axis_max = self.axis.max if self.axis.max is not None else value
        value = max(axis_min, min(axis_max, value))

        bounds = self._bounds
        if self._dragging is BoundKind.UPPER:
            self._publish(RangeBounds(lower=bounds.lower, upper=max(value, bounds.lower)))
        else:
            self._publish(RangeBounds(lower=min(value, bounds.upper), upper=bounds.upper))

    def pointer_up(self):
        """Dragging -> Idle. The live value is the committed value."""
        if self._dragging is None:
            return
        logger.debug(
            f"[Range] Drag end: {self._dragging.value} -> "
            f"[{self._bounds.lower}, {self._bounds.upper}]"
        )
        self._dragging = None
        for listener in list(self._finished_listeners):
            listener(self._bounds)

    def pointer_leave(self):
        """Pointer left the canvas: clear the cursor and end any drag."""
        self._cursor = None
        self.pointer_up()
