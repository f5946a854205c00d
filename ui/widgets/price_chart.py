"""
Price Chart Widget

Price line of the selected timeframe with two draggable range bounds.
"""

from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import QPainter, QColor, QPen, QBrush, QFont, QPainterPath, QFontMetrics
from typing import Callable, List, Optional

from config import ZOOM_STEP
from src.axis import ValueAxis, chart_y_range
from src.formatting import PLACEHOLDER, fmt_usd2, format_price
from src.range_controller import BoundKind, DRAW_ORDER, RangeBounds, RangeBoundsController
from src.series import PricePoint

BOUND_COLORS = {
    BoundKind.UPPER: QColor("#22c55e"),
    BoundKind.LOWER: QColor("#ef4444"),
}


class PriceChartWidget(QWidget):
    """
    Custom widget for picking a price range on the price history.

    Draws the price line, a shaded band between the bounds, and one
    labelled line per bound. Mouse events are forwarded to the
    RangeBoundsController; the wheel zooms the value axis.
    """

    margin_left = 80
    margin_right = 20
    margin_top = 40
    margin_bottom = 40

    def __init__(self, parent=None):
        super().__init__(parent)
        self.points: List[PricePoint] = []
        self.label_for: Callable[[int], str] = str
        self.axis = ValueAxis()
        self.controller: Optional[RangeBoundsController] = None
        self._unsubscribe: List[Callable[[], None]] = []
        self.setMinimumHeight(300)
        self.setMinimumWidth(300)
        self.setMouseTracking(True)

    def set_controller(self, controller: RangeBoundsController):
        """Attach the range controller and follow its updates."""
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self.controller = controller
        controller.attach_axis(self.axis)
        self._unsubscribe = [
            controller.on_bounds_changed(self._on_bounds_changed),
            controller.on_drag_finished(self._on_drag_finished),
        ]
        self._update_axis_range()
        self.update()

    def set_data(self, points: List[PricePoint], label_for: Callable[[int], str] = str):
        """
        Set the price window to draw.

        Args:
            points: Price points, ascending by timestamp
            label_for: Formats a timestamp for the x axis
        """
        self.points = list(points)
        self.label_for = label_for
        self._update_axis_range()
        self.update()

    def clear(self):
        """Clear all data."""
        self.points = []
        self._update_axis_range()
        self.update()

    # ---- axis ----

    def _update_axis_range(self):
        prices = [p.price for p in self.points]
        if self.controller is not None:
            bounds = self.controller.get_bounds()
            y_min, y_max = chart_y_range(prices, bounds.lower, bounds.upper)
        else:
            y_min, y_max = chart_y_range(prices, float("nan"), float("nan"))
        self.axis.set_data_range(y_min, y_max)
        self._update_pixel_span()

    def _update_pixel_span(self):
        self.axis.set_pixel_span(self.margin_top, self.height() - self.margin_bottom)

    def _on_bounds_changed(self, bounds: RangeBounds):
        # Keep the scale still while a bound is being dragged
        if self.controller is not None and not self.controller.is_dragging:
            self._update_axis_range()
        self.update()

    def _on_drag_finished(self, bounds: RangeBounds):
        self._update_axis_range()
        self.update()

    # ---- events ----

    def resizeEvent(self, event):
        self._update_pixel_span()
        super().resizeEvent(event)

    def mousePressEvent(self, event):
        if self.controller is not None and event.button() == Qt.MouseButton.LeftButton:
            if self.controller.pointer_down(event.position().y()) is not None:
                self.setCursor(Qt.CursorShape.SizeVerCursor)
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self.controller is not None:
            self.controller.pointer_move(event.position().y())
            if not self.controller.is_dragging:
                hover = self.controller.hit_test(event.position().y())
                self.setCursor(
                    Qt.CursorShape.SizeVerCursor if hover else Qt.CursorShape.ArrowCursor
                )
            self.update()
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if self.controller is not None:
            self.controller.pointer_up()
            self.setCursor(Qt.CursorShape.ArrowCursor)
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        if self.controller is not None:
            self.controller.pointer_leave()
            self.setCursor(Qt.CursorShape.ArrowCursor)
            self.update()
        super().leaveEvent(event)

    def wheelEvent(self, event):
        delta = event.angleDelta().y()
        if delta == 0 or not self.axis.has_range:
            return
        center = self.axis.value_for_pixel(event.position().y())
        factor = ZOOM_STEP if delta > 0 else 1 / ZOOM_STEP
        self.axis.zoom(factor, center)
        self.update()
        event.accept()

    # ---- painting ----

    def paintEvent(self, event):
        """Custom paint event for drawing the chart."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        # Background
        painter.fillRect(self.rect(), QColor("#0b1220"))

        if not self.points or not self.axis.has_range:
            painter.setPen(QColor("#606070"))
            painter.setFont(QFont("Segoe UI", 12))
            painter.drawText(
                self.rect(),
                Qt.AlignmentFlag.AlignCenter,
                "Loading price data..."
            )
            return

        left = self.margin_left
        right = self.width() - self.margin_right
        top = self.margin_top
        bottom = self.height() - self.margin_bottom

        painter.save()
        painter.setClipRect(QRectF(left, top, right - left, bottom - top))
        self._draw_price_line(painter, left, right)
        if self.controller is not None:
            self._draw_bounds(painter, left, right)
            self._draw_cursor(painter, left, right)
        painter.restore()

        self._draw_axes(painter, left, right, top, bottom)

    def _x_for_index(self, index: int, left: float, right: float) -> float:
        if len(self.points) < 2:
            return (left + right) / 2
        return left + index / (len(self.points) - 1) * (right - left)

    def _draw_price_line(self, painter: QPainter, left: float, right: float):
        path = QPainterPath()
        for i, point in enumerate(self.points):
            pt = QPointF(self._x_for_index(i, left, right), self.axis.pixel_for_value(point.price))
            if i == 0:
                path.moveTo(pt)
            else:
                path.lineTo(pt)

        painter.setPen(QPen(QColor("#e5e7eb"), 2))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(path)

    def _draw_bounds(self, painter: QPainter, left: float, right: float):
        bounds = self.controller.get_bounds()
        y_upper = self.axis.pixel_for_value(bounds.upper)
        y_lower = self.axis.pixel_for_value(bounds.lower)

        # Band between the bounds
        painter.fillRect(
            QRectF(left, y_upper, right - left, y_lower - y_upper),
            QColor(99, 102, 241, 30)
        )

        label_w, label_h = 118, 24
        mid_x = (left + right) / 2
        painter.setFont(QFont("Segoe UI", 9, QFont.Weight.DemiBold))

        for which in DRAW_ORDER:
            y = self.axis.pixel_for_value(bounds.value_of(which))
            color = BOUND_COLORS[which]

            painter.setPen(QPen(color, 2))
            painter.drawLine(QPointF(left, y), QPointF(right, y))

            # Pill label in the middle of the line
            pill = QRectF(mid_x - label_w / 2, y - label_h / 2, label_w, label_h)
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(color))
            painter.drawRoundedRect(pill, label_h / 2, label_h / 2)
            painter.setPen(QColor("#ffffff"))
            painter.drawText(pill, Qt.AlignmentFlag.AlignCenter, which.value)

            # Value at the right edge
            painter.setPen(color)
            painter.drawText(
                QRectF(right - 110, y - label_h, 105, label_h),
                Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignBottom,
                fmt_usd2(bounds.value_of(which))
            )

    def _draw_cursor(self, painter: QPainter, left: float, right: float):
        cursor = self.controller.cursor
        if cursor is None:
            return

        painter.setPen(QPen(QColor(148, 163, 184, 140), 1, Qt.PenStyle.DashLine))
        painter.drawLine(QPointF(left, cursor.y), QPointF(right, cursor.y))

        text = fmt_usd2(cursor.value)
        painter.setFont(QFont("Segoe UI", 8, QFont.Weight.DemiBold))
        metrics = QFontMetrics(painter.font())
        w = metrics.horizontalAdvance(text) + 12
        h = 18
        y0 = max(self.margin_top, min(self.height() - self.margin_bottom - h, cursor.y - h / 2))
        box = QRectF(left + 6, y0, w, h)

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(QColor(17, 24, 39, 204)))
        painter.drawRoundedRect(box, h / 2, h / 2)
        painter.setPen(QColor("#ffffff"))
        painter.drawText(box, Qt.AlignmentFlag.AlignCenter, text)

    def _draw_axes(self, painter: QPainter, left: float, right: float, top: float, bottom: float):
        # Price axis
        painter.setPen(QPen(QColor("#1e293b"), 2))
        painter.drawLine(QPointF(left, top), QPointF(left, bottom))

        painter.setFont(QFont("Segoe UI", 9))
        num_labels = 6
        for i in range(num_labels):
            y = top + (i / (num_labels - 1)) * (bottom - top)
            painter.setPen(QColor("#94a3b8"))
            label = format_price(self.axis.value_for_pixel(y))
            painter.drawText(5, int(y + 4), label if label == PLACEHOLDER else f"${label}")

        # Time labels
        n = len(self.points)
        num_time_labels = min(6, n)
        for i in range(num_time_labels):
            index = round(i * (n - 1) / max(1, num_time_labels - 1))
            x = self._x_for_index(index, left, right)
            text = self.label_for(self.points[index].timestamp)
            painter.drawText(
                QRectF(x - 40, bottom + 6, 80, 20),
                Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop,
                text
            )

        # Legend
        painter.setPen(QColor("#94a3b8"))
        painter.drawText(
            int(left), self.height() - 4,
            "Drag a bound to move it | Wheel to zoom"
        )
