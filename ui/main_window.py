"""
Main Window

Hosts the range tab and keeps the per-user view state in QSettings.
"""

import os

from PyQt6.QtWidgets import QMainWindow, QStatusBar, QLabel, QMessageBox
from PyQt6.QtCore import QSettings, QTimer
from PyQt6.QtGui import QAction, QActionGroup

from config import DEFAULT_TIMEFRAME, TIMEFRAMES, get_timeframe

from .range_tab import RangeTab

STYLESHEET = os.path.join(os.path.dirname(__file__), "styles", "dark_theme.qss")


class MainWindow(QMainWindow):
    """
    Pool Range Estimator window.

    Contains:
    - File / View / Help menus (reload, timeframes, reset range)
    - Range tab (chart + estimate)
    - Status bar with the current price or load status

    The last timeframe, the deposit and the window geometry survive restarts.
    """

    def __init__(self, client=None):
        super().__init__()
        self.setWindowTitle("Pool Range Estimator")
        self.setMinimumSize(1100, 700)
        self.settings = QSettings("PoolRangeEstimator", "Settings")

        self.range_tab = RangeTab(client=client)
        self.setCentralWidget(self.range_tab)
        self._build_menus()
        self._build_status_bar()
        self.range_tab.status_changed.connect(self.status_label.setText)
        self.range_tab.view_changed.connect(self._on_view_changed)

        if os.path.exists(STYLESHEET):
            with open(STYLESHEET, "r") as f:
                self.setStyleSheet(f.read())
        self._restore_view_state()

        # Start loading once the event loop runs
        QTimer.singleShot(0, self.range_tab.load_data)

    # ============================================================
    # MENUS
    # ============================================================

    def _build_menus(self):
        menubar = self.menuBar()

        data_menu = menubar.addMenu("File")
        reload_action = QAction("Reload Data", self)
        reload_action.setShortcut("Ctrl+R")
        reload_action.triggered.connect(self.range_tab.load_data)
        data_menu.addAction(reload_action)
        data_menu.addSeparator()
        quit_action = QAction("Exit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        data_menu.addAction(quit_action)

        view_menu = menubar.addMenu("View")
        self.timeframe_actions = QActionGroup(self)
        self.timeframe_actions.setExclusive(True)
        self._timeframe_action_by_id = {}
        for n, tf in enumerate(TIMEFRAMES, start=1):
            action = QAction(tf.label, self)
            action.setCheckable(True)
            action.setShortcut(f"Ctrl+{n}")
            action.triggered.connect(lambda checked, tf_id=tf.id: self.select_timeframe(tf_id))
            self.timeframe_actions.addAction(action)
            self._timeframe_action_by_id[tf.id] = action
            view_menu.addAction(action)
        view_menu.addSeparator()
        reset_action = QAction("Reset Range", self)
        reset_action.setShortcut("Ctrl+0")
        reset_action.triggered.connect(self.range_tab.reset_range)
        view_menu.addAction(reset_action)

        help_menu = menubar.addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

    def _build_status_bar(self):
        status_bar = QStatusBar()
        self.setStatusBar(status_bar)
        self.status_label = QLabel("Not loaded")
        self.status_label.setStyleSheet("color: #a0a0a0;")
        status_bar.addPermanentWidget(self.status_label)

    def select_timeframe(self, timeframe_id: str):
        self.range_tab.set_view(timeframe_id)

    def _on_view_changed(self, timeframe_id: str):
        self._timeframe_action_by_id[get_timeframe(timeframe_id).id].setChecked(True)

    # ============================================================
    # PERSISTED STATE
    # ============================================================

    def _restore_view_state(self):
        geometry = self.settings.value("window/geometry")
        if geometry:
            self.restoreGeometry(geometry)
        state = self.settings.value("window/state")
        if state:
            self.restoreState(state)

        self.select_timeframe(self.settings.value("range/timeframe", DEFAULT_TIMEFRAME))
        deposit = self.settings.value("range/deposit")
        if deposit:
            self.range_tab.deposit_edit.setText(str(deposit))

    def _save_view_state(self):
        self.settings.setValue("window/geometry", self.saveGeometry())
        self.settings.setValue("window/state", self.saveState())
        self.settings.setValue("range/timeframe", self.range_tab.view)
        self.settings.setValue("range/deposit", self.range_tab.deposit_edit.text())

    def closeEvent(self, event):
        """Persist view state and let running loaders finish."""
        self._save_view_state()
        for worker in list(self.range_tab.workers):
            worker.wait(2000)
        event.accept()

    def _show_about(self):
        QMessageBox.about(
            self,
            "About Pool Range Estimator",
            "<h3>Pool Range Estimator</h3>"
            "<p>Version 1.0.0</p>"
            "<p>Estimate fee income for concentrated liquidity "
            "in a price range you pick on the chart.</p>"
            "<ul>"
            "<li>Drag the Upper / Lower Bound lines or type values</li>"
            "<li>Mouse wheel zooms the price axis, Reset Range clears it</li>"
            "<li>Ctrl+1..5 switch the chart timeframe</li>"
            "<li>Calculate uses last week's pool fees and the "
            "liquidity currently in range</li>"
            "</ul>"
            "<p><b>Note:</b> Estimates assume last week's fees repeat "
            "and are not investment advice.</p>"
        )
