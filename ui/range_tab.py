"""
Range Tab

Pick a price range on the chart and estimate fees / APR for a deposit.
"""

import logging

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox, QGridLayout,
    QLabel, QLineEdit, QPushButton, QButtonGroup
)
from PyQt6.QtCore import pyqtSignal

from config import DEFAULT_DEPOSIT_USD, DEFAULT_TIMEFRAME, TIMEFRAMES, get_timeframe
from src.formatting import (
    PLACEHOLDER, fmt_int, fmt_percent, fmt_usd0, format_day, format_hour,
    format_price, parse_number
)
from src.math.estimate import EstimateResult
from src.pool_data import DailySnapshot, PoolDataClient
from src.pool_session import SERIES_NAMES, PoolSession
from src.range_controller import RangeBounds

from .widgets.price_chart import PriceChartWidget
from .workers import SeriesLoadWorker

logger = logging.getLogger(__name__)


class RangeTab(QWidget):
    """
    Range selection and return estimate.

    Allows users to:
    - Switch the chart timeframe
    - Drag or type the lower/upper bounds
    - See liquidity in range and recent pool fees
    - Estimate daily/weekly fees and APR for a deposit
    """

    status_changed = pyqtSignal(str)
    view_changed = pyqtSignal(str)

    def __init__(self, client: PoolDataClient = None, parent=None):
        super().__init__(parent)
        self.client = client or PoolDataClient()
        self.session = PoolSession()
        self.view = DEFAULT_TIMEFRAME
        self.workers = []
        self.setup_ui()

        self.session.on_bounds_changed(self._on_bounds_changed)
        self.price_chart.set_controller(self.session.controller)
        self._on_bounds_changed(self.session.get_bounds())

    def setup_ui(self):
        main_layout = QHBoxLayout(self)

        # Left side - Parameters
        left_widget = QWidget()
        left_layout = QVBoxLayout(left_widget)
        left_widget.setMaximumWidth(360)

        # Range Group
        range_group = QGroupBox("Price Range")
        range_layout = QGridLayout(range_group)

        range_layout.addWidget(QLabel("Upper ($):"), 0, 0)
        self.upper_edit = QLineEdit()
        self.upper_edit.editingFinished.connect(self._apply_upper)
        range_layout.addWidget(self.upper_edit, 0, 1)

        range_layout.addWidget(QLabel("Lower ($):"), 1, 0)
        self.lower_edit = QLineEdit()
        self.lower_edit.editingFinished.connect(self._apply_lower)
        range_layout.addWidget(self.lower_edit, 1, 1)

        range_layout.addWidget(QLabel("Liquidity in range:"), 2, 0)
        self.liquidity_label = QLabel(PLACEHOLDER)
        range_layout.addWidget(self.liquidity_label, 2, 1)

        self.reset_btn = QPushButton("Reset Range")
        self.reset_btn.clicked.connect(self.reset_range)
        range_layout.addWidget(self.reset_btn, 3, 0, 1, 2)

        left_layout.addWidget(range_group)

        # Fees Group
        fees_group = QGroupBox("Pool Fees")
        fees_layout = QGridLayout(fees_group)

        self.fee_labels = {}
        for row, (key, title) in enumerate([
            ("last_1d", "Last 24h:"),
            ("last_7d", "Last 7 days:"),
            ("last_30d", "Last 30 days:"),
        ]):
            fees_layout.addWidget(QLabel(title), row, 0)
            self.fee_labels[key] = QLabel(PLACEHOLDER)
            fees_layout.addWidget(self.fee_labels[key], row, 1)

        left_layout.addWidget(fees_group)

        # Estimate Group
        estimate_group = QGroupBox("Estimate")
        estimate_layout = QGridLayout(estimate_group)

        estimate_layout.addWidget(QLabel("Deposit ($):"), 0, 0)
        self.deposit_edit = QLineEdit(fmt_int(DEFAULT_DEPOSIT_USD))
        self.deposit_edit.returnPressed.connect(self.calculate)
        estimate_layout.addWidget(self.deposit_edit, 0, 1)

        self.calculate_btn = QPushButton("Calculate")
        self.calculate_btn.setObjectName("primaryButton")
        self.calculate_btn.clicked.connect(self.calculate)
        estimate_layout.addWidget(self.calculate_btn, 1, 0, 1, 2)

        estimate_layout.addWidget(QLabel("Daily fees:"), 2, 0)
        self.daily_label = QLabel(PLACEHOLDER)
        estimate_layout.addWidget(self.daily_label, 2, 1)

        estimate_layout.addWidget(QLabel("Weekly fees:"), 3, 0)
        self.weekly_label = QLabel(PLACEHOLDER)
        estimate_layout.addWidget(self.weekly_label, 3, 1)

        estimate_layout.addWidget(QLabel("APR:"), 4, 0)
        self.apr_label = QLabel(PLACEHOLDER)
        estimate_layout.addWidget(self.apr_label, 4, 1)

        left_layout.addWidget(estimate_group)

        # Error message
        self.error_label = QLabel("")
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("color: crimson; font-weight: 600;")
        self.error_label.hide()
        left_layout.addWidget(self.error_label)

        left_layout.addStretch()

        # Right side - Chart
        right_widget = QWidget()
        right_layout = QVBoxLayout(right_widget)

        timeframe_row = QHBoxLayout()
        self.timeframe_group = QButtonGroup(self)
        self.timeframe_group.setExclusive(True)
        self.timeframe_buttons = {}
        for tf in TIMEFRAMES:
            btn = QPushButton(tf.label)
            btn.setCheckable(True)
            btn.setChecked(tf.id == self.view)
            btn.clicked.connect(lambda checked, tf_id=tf.id: self.set_view(tf_id))
            self.timeframe_group.addButton(btn)
            self.timeframe_buttons[tf.id] = btn
            timeframe_row.addWidget(btn)
        timeframe_row.addStretch()
        right_layout.addLayout(timeframe_row)

        self.price_chart = PriceChartWidget()
        right_layout.addWidget(self.price_chart, 1)

        # Add to main layout
        main_layout.addWidget(left_widget)
        main_layout.addWidget(right_widget, 1)

    # ============================================================
    # LOADING
    # ============================================================

    def load_data(self):
        """Start one loader per series. Older results are ignored when they land."""
        self.session.clear_error()
        self.error_label.hide()
        self.status_changed.emit("Loading pool data...")

        for series in SERIES_NAMES:
            request_id = self.session.begin_load(series)
            worker = SeriesLoadWorker(self.client, series, request_id, self)
            worker.loaded.connect(self._on_series_loaded)
            worker.failed.connect(self._on_series_failed)
            worker.finished.connect(lambda w=worker: self._on_worker_finished(w))
            self.workers.append(worker)
            worker.start()

    def _on_worker_finished(self, worker: SeriesLoadWorker):
        if worker in self.workers:
            self.workers.remove(worker)
        worker.deleteLater()

    def _on_series_loaded(self, series: str, request_id: int, payload):
        if series == "hourly":
            applied = self.session.apply_hourly(request_id, payload)
        elif series == "daily":
            snapshot: DailySnapshot = payload
            applied = self.session.apply_daily(request_id, snapshot.prices, snapshot.fees)
        else:
            applied = self.session.apply_ticks(request_id, payload)

        if not applied:
            return

        if series == "daily":
            self._update_fee_labels()
        if series in ("hourly", "daily"):
            self._update_chart()
        self._update_liquidity()

        price = self.session.current_price
        if price is not None:
            self.status_changed.emit(f"Current price: ${format_price(price)}")

    def _on_series_failed(self, series: str, request_id: int, message: str):
        if not self.session.report_error(series, message, request_id):
            return
        self.error_label.setText(self.session.load_error)
        self.error_label.show()
        self.status_changed.emit(f"Failed to load {series} data")

    # ============================================================
    # RANGE
    # ============================================================

    def _apply_upper(self):
        value = parse_number(self.upper_edit.text())
        if value is None:
            self.upper_edit.setText(format_price(self.session.get_bounds().upper))
            return
        self.session.set_bounds(upper=value)

    def _apply_lower(self):
        value = parse_number(self.lower_edit.text())
        if value is None:
            self.lower_edit.setText(format_price(self.session.get_bounds().lower))
            return
        self.session.set_bounds(lower=value)

    def _on_bounds_changed(self, bounds: RangeBounds):
        self.upper_edit.setText(format_price(bounds.upper))
        self.lower_edit.setText(format_price(bounds.lower))
        self._update_liquidity()

    def reset_range(self):
        """Reset bounds to -/+5% of the current price and clear chart zoom."""
        if self.session.reset_bounds():
            self.price_chart.update()

    # ============================================================
    # DISPLAY
    # ============================================================

    def set_view(self, timeframe_id: str):
        self.view = get_timeframe(timeframe_id).id
        self.timeframe_buttons[self.view].setChecked(True)
        self.view_changed.emit(self.view)
        self._update_chart()

    def _update_chart(self):
        tf = get_timeframe(self.view)
        label_for = format_hour if tf.source == "hourly" else format_day
        self.price_chart.set_data(self.session.active_series(self.view), label_for)

    def _update_liquidity(self):
        self.liquidity_label.setText(fmt_usd0(self.session.liquidity_in_range()))

    def _update_fee_labels(self):
        summary = self.session.fee_summary
        self.fee_labels["last_1d"].setText(fmt_usd0(summary.last_1d))
        self.fee_labels["last_7d"].setText(fmt_usd0(summary.last_7d))
        self.fee_labels["last_30d"].setText(fmt_usd0(summary.last_30d))

    def calculate(self):
        """Estimate fees / APR for the deposit and the current range."""
        deposit = parse_number(self.deposit_edit.text())
        result = self.session.calculate(deposit)
        self.show_estimate(result)

    def show_estimate(self, result: EstimateResult):
        self.daily_label.setText(fmt_usd0(result.daily_fees_usd))
        self.weekly_label.setText(fmt_usd0(result.weekly_fees_usd))
        self.apr_label.setText(fmt_percent(result.apr_percent))
