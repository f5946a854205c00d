"""
Tests for src.range_controller: bound drag state machine.

Test axis (see conftest): value == 100 - y, so with bounds 40 / 60
the upper line is at y=40 and the lower line at y=60.
"""

import math
import random

import pytest

from config import DEFAULT_LOWER_BOUND, DEFAULT_UPPER_BOUND
from src.axis import ValueAxis
from src.range_controller import (
    DRAW_ORDER,
    BoundKind,
    CursorPosition,
    RangeBounds,
    RangeBoundsController,
)


def _controller_with(axis, lower, upper):
    return RangeBoundsController(lower=lower, upper=upper, axis=axis)


class TestInitialState:
    """Construction defaults."""

    def test_defaults(self):
        controller = RangeBoundsController()
        assert controller.get_bounds() == RangeBounds(DEFAULT_LOWER_BOUND, DEFAULT_UPPER_BOUND)
        assert controller.state is None
        assert not controller.seeded

    def test_reversed_constructor_args_normalized(self):
        controller = RangeBoundsController(lower=10.0, upper=5.0)
        assert controller.get_bounds() == RangeBounds(lower=5.0, upper=10.0)

    def test_bounds_value_of(self):
        bounds = RangeBounds(lower=1.0, upper=2.0)
        assert bounds.value_of(BoundKind.LOWER) == 1.0
        assert bounds.value_of(BoundKind.UPPER) == 2.0

    def test_lower_drawn_last(self):
        assert DRAW_ORDER[-1] is BoundKind.LOWER


class TestHitTest:
    """Grabbing a bound line."""

    def test_within_tolerance(self, controller):
        assert controller.hit_test(45) is BoundKind.UPPER
        assert controller.hit_test(55) is BoundKind.LOWER

    def test_tolerance_is_strict(self, controller):
        """Exactly 6px away does not grab."""
        assert controller.hit_test(46) is None
        assert controller.hit_test(34) is None

    def test_far_from_both(self, controller):
        assert controller.hit_test(50) is None

    def test_overlap_prefers_lower(self, axis):
        """Both lines in tolerance: the one drawn on top (lower) wins."""
        controller = _controller_with(axis, 50.0, 52.0)  # lines at y=50 / y=48
        assert controller.hit_test(49) is BoundKind.LOWER

    def test_equal_bounds_prefers_lower(self, axis):
        controller = _controller_with(axis, 50.0, 50.0)
        assert controller.hit_test(50) is BoundKind.LOWER

    def test_no_axis(self):
        assert RangeBoundsController(lower=40.0, upper=60.0).hit_test(40) is None


class TestDrag:
    """Pointer down / move / up."""

    def test_grab_and_drag_upper(self, controller):
        assert controller.pointer_down(41) is BoundKind.UPPER
        assert controller.is_dragging

        controller.pointer_move(20)
        bounds = controller.get_bounds()
        assert bounds.upper == pytest.approx(80.0)
        assert bounds.lower == 40.0

    def test_drag_lower(self, controller):
        assert controller.pointer_down(60) is BoundKind.LOWER
        controller.pointer_move(75)
        assert controller.get_bounds().lower == pytest.approx(25.0)
        assert controller.get_bounds().upper == 60.0

    def test_miss_stays_idle(self, controller):
        assert controller.pointer_down(50) is None
        assert controller.state is None
        controller.pointer_move(10)
        assert controller.get_bounds() == RangeBounds(40.0, 60.0)

    def test_pointer_down_outside_plot(self, axis):
        controller = _controller_with(axis, 40.0, 100.0)  # upper line at y=0
        assert controller.pointer_down(-3) is None
        assert controller.state is None

    def test_pointer_down_without_axis(self):
        controller = RangeBoundsController(lower=40.0, upper=60.0)
        assert controller.pointer_down(40) is None

    def test_second_pointer_down_keeps_drag(self, controller):
        controller.pointer_down(41)
        assert controller.pointer_down(60) is BoundKind.UPPER

    def test_lower_through_upper_clamps_exactly(self, controller):
        controller.pointer_down(60)
        controller.pointer_move(5)  # value 95, above upper
        bounds = controller.get_bounds()
        assert bounds.lower == bounds.upper == 60.0

    def test_upper_through_lower_clamps_exactly(self, controller):
        controller.pointer_down(40)
        controller.pointer_move(90)  # value 10, below lower
        bounds = controller.get_bounds()
        assert bounds.upper == bounds.lower == 40.0

    def test_drag_clamped_to_axis_max(self, controller):
        controller.pointer_down(40)
        controller.pointer_move(-50)  # value 150
        assert controller.get_bounds().upper == 100.0

    def test_drag_clamped_to_axis_min(self, controller):
        controller.pointer_down(60)
        controller.pointer_move(250)  # value -150
        assert controller.get_bounds().lower == 0.0

    def test_pointer_up_returns_to_idle(self, controller):
        controller.pointer_down(41)
        controller.pointer_move(30)
        controller.pointer_up()
        assert controller.state is None

        committed = controller.get_bounds()
        controller.pointer_move(10)
        assert controller.get_bounds() == committed

    def test_pointer_leave_ends_drag(self, controller):
        controller.pointer_down(41)
        controller.pointer_leave()
        assert controller.state is None
        assert controller.cursor is None

    def test_grab_clears_cursor(self, controller):
        controller.pointer_move(41)
        assert controller.cursor is not None
        controller.pointer_down(41)
        assert controller.cursor is None


class TestCursor:
    """Hover cursor while idle."""

    def test_cursor_tracks_pointer(self, controller):
        controller.pointer_move(25)
        cursor = controller.cursor
        assert isinstance(cursor, CursorPosition)
        assert cursor.y == 25
        assert cursor.value == pytest.approx(75.0)

    def test_cursor_cleared_outside_plot(self, controller):
        controller.pointer_move(25)
        controller.pointer_move(150)
        assert controller.cursor is None

    def test_cursor_cleared_on_leave(self, controller):
        controller.pointer_move(25)
        controller.pointer_leave()
        assert controller.cursor is None

    def test_no_cursor_while_dragging(self, controller):
        controller.pointer_down(41)
        controller.pointer_move(25)
        assert controller.cursor is None


class TestListeners:
    """Bound change and drag-finished notifications."""

    def test_every_move_published(self, controller):
        seen = []
        controller.on_bounds_changed(seen.append)

        controller.pointer_down(41)
        controller.pointer_move(30)
        controller.pointer_move(20)

        assert [b.upper for b in seen] == [pytest.approx(70.0), pytest.approx(80.0)]

    def test_unchanged_bounds_not_published(self, controller):
        seen = []
        controller.on_bounds_changed(seen.append)
        controller.set_upper(60.0)
        assert seen == []

    def test_drag_finished_once(self, controller):
        finished = []
        controller.on_drag_finished(finished.append)

        controller.pointer_down(41)
        controller.pointer_move(30)
        controller.pointer_up()
        controller.pointer_up()

        assert len(finished) == 1
        assert finished[0] == controller.get_bounds()

    def test_pointer_up_when_idle_not_finished(self, controller):
        finished = []
        controller.on_drag_finished(finished.append)
        controller.pointer_up()
        controller.pointer_leave()
        assert finished == []

    def test_unsubscribe(self, controller):
        seen = []
        unsubscribe = controller.on_bounds_changed(seen.append)
        unsubscribe()
        unsubscribe()
        controller.set_upper(70.0)
        assert seen == []


class TestDirectInput:
    """Typed bound values."""

    def test_set_upper(self, controller):
        assert controller.set_upper(75.0)
        assert controller.get_bounds() == RangeBounds(40.0, 75.0)

    def test_set_upper_below_lower_clamps(self, controller):
        controller.set_upper(10.0)
        assert controller.get_bounds() == RangeBounds(40.0, 40.0)

    def test_set_lower_above_upper_clamps(self, controller):
        controller.set_lower(90.0)
        assert controller.get_bounds() == RangeBounds(60.0, 60.0)

    @pytest.mark.parametrize("value", [None, math.nan, math.inf])
    def test_invalid_value_ignored(self, controller, value):
        assert not controller.set_upper(value)
        assert not controller.set_lower(value)
        assert controller.get_bounds() == RangeBounds(40.0, 60.0)

    def test_set_bounds_moves_range_up(self, controller):
        """Moving the whole range above the old upper works in one call."""
        bounds = controller.set_bounds(lower=80.0, upper=90.0)
        assert bounds == RangeBounds(80.0, 90.0)

    def test_set_bounds_moves_range_down(self, controller):
        """Moving the whole range below the old lower works in one call."""
        bounds = controller.set_bounds(lower=10.0, upper=20.0)
        assert bounds == RangeBounds(10.0, 20.0)

    def test_set_bounds_pair_notifies_once(self, controller):
        seen = []
        controller.on_bounds_changed(seen.append)
        controller.set_bounds(lower=10.0, upper=20.0)
        assert seen == [RangeBounds(10.0, 20.0)]

    def test_set_bounds_pair_with_invalid_side(self, controller):
        assert controller.set_bounds(lower=math.nan, upper=30.0) == RangeBounds(40.0, 40.0)

    def test_set_bounds_single_side(self, controller):
        assert controller.set_bounds(lower=10.0) == RangeBounds(10.0, 60.0)

    def test_set_bounds_crossed_values(self, controller):
        bounds = controller.set_bounds(lower=90.0, upper=70.0)
        assert bounds.lower <= bounds.upper
        assert bounds == RangeBounds(70.0, 70.0)


class TestSeedAndReset:
    """Seeding from the first price and explicit reset."""

    def test_seed(self):
        controller = RangeBoundsController()
        assert controller.seed_from_price(2000.0)
        assert controller.get_bounds() == RangeBounds(2000.0 * 0.95, 2000.0 * 1.05)
        assert controller.seeded

    def test_seed_only_once(self):
        controller = RangeBoundsController()
        controller.seed_from_price(2000.0)
        controller.set_upper(2500.0)

        assert not controller.seed_from_price(3000.0)
        assert controller.get_bounds().upper == 2500.0

    @pytest.mark.parametrize("price", [None, 0.0, -5.0, math.nan, math.inf])
    def test_seed_needs_valid_price(self, price):
        controller = RangeBoundsController()
        assert not controller.seed_from_price(price)
        assert not controller.seeded

    def test_reset_exact(self, controller):
        assert controller.reset_bounds(3000.0)
        assert controller.get_bounds() == RangeBounds(lower=3000.0 * 0.95, upper=3000.0 * 1.05)

    def test_reset_during_drag(self, controller):
        controller.pointer_down(41)
        controller.pointer_move(10)
        controller.reset_bounds(50.0)

        assert controller.state is None
        assert controller.get_bounds() == RangeBounds(50.0 * 0.95, 50.0 * 1.05)

    def test_reset_clears_zoom(self, controller, axis):
        axis.zoom(2.0)
        assert axis.is_zoomed
        controller.reset_bounds(50.0)
        assert not axis.is_zoomed

    def test_reset_idempotent(self, controller):
        controller.reset_bounds(50.0)
        first = controller.get_bounds()
        controller.reset_bounds(50.0)
        assert controller.get_bounds() == first

    @pytest.mark.parametrize("price", [None, math.nan, 0.0, -10.0])
    def test_reset_without_price(self, controller, price):
        assert not controller.reset_bounds(price)
        assert controller.get_bounds() == RangeBounds(40.0, 60.0)


class TestOrderingInvariant:
    """lower <= upper holds after any event sequence."""

    @pytest.mark.parametrize("seed", range(5))
    def test_random_event_sequences(self, seed):
        rng = random.Random(seed)
        axis = ValueAxis(pixel_top=0, pixel_bottom=400)
        axis.set_data_range(1000.0, 3000.0)
        controller = RangeBoundsController(lower=1900.0, upper=2100.0, axis=axis)

        published = []
        controller.on_bounds_changed(published.append)

        for _ in range(300):
            action = rng.choice(["down", "move", "up", "leave", "upper", "lower", "zoom"])
            y = rng.uniform(-100, 500)
            if action == "down":
                line = axis.pixel_for_value(controller.get_bounds().value_of(rng.choice(DRAW_ORDER)))
                controller.pointer_down(line + rng.uniform(-5, 5))
            elif action == "move":
                controller.pointer_move(y)
            elif action == "up":
                controller.pointer_up()
            elif action == "leave":
                controller.pointer_leave()
            elif action == "upper":
                controller.set_upper(rng.uniform(0, 4000))
            elif action == "lower":
                controller.set_lower(rng.uniform(0, 4000))
            else:
                axis.zoom(rng.choice([0.9, 1.1]), axis.value_for_pixel(y))

            bounds = controller.get_bounds()
            assert bounds.lower <= bounds.upper

        assert all(b.lower <= b.upper for b in published)
