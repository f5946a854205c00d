#!/usr/bin/env python3
"""
Pool Range Estimator - Desktop Application

Entry point for the PyQt6 range picker.

Usage:
    python run_ui.py
    python run_ui.py --data-url http://192.168.1.10:3000/data/ --debug
"""

import sys
import os
import argparse
import dataclasses
import logging
import traceback

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from PyQt6.QtWidgets import QApplication, QMessageBox
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from config import get_data_source_config
from src.pool_data import PoolDataClient

logger = logging.getLogger(__name__)

LOG_FILE = "pool_range.log"


def _global_exception_handler(exc_type, exc_value, exc_tb):
    """
    Last-resort handler for errors raised inside Qt slots.

    Without it PyQt6 aborts the process on an unhandled exception.
    """
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_tb)
        return

    details = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    logger.critical(f"[UI] Unhandled exception:\n{details}")

    if QApplication.instance() is None:
        return
    QMessageBox.critical(
        None,
        "Pool Range Estimator - Error",
        f"{exc_type.__name__}: {exc_value}\n\nDetails were written to {LOG_FILE}."
    )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pool Range Estimator")
    parser.add_argument(
        "--data-url",
        help="Base URL of the pool snapshots (overrides POOL_DATA_URL)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level"
    )
    return parser.parse_args(argv)


def build_client(data_url=None) -> PoolDataClient:
    """Data client from .env / environment, with an optional URL override."""
    config = get_data_source_config()
    if data_url:
        config = dataclasses.replace(config, base_url=data_url)
    logger.info(f"[API] Snapshots from {config.base_url}")
    return PoolDataClient(config=config)


def main():
    args = parse_args()

    sys.excepthook = _global_exception_handler

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.FileHandler(LOG_FILE, encoding="utf-8"),
            logging.StreamHandler()
        ]
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Pool Range Estimator")
    app.setOrganizationName("PoolRangeEstimator")
    app.setApplicationVersion("1.0.0")
    app.setFont(QFont("Segoe UI", 10))
    app.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    try:
        client = build_client(args.data_url)
    except ValueError as e:
        logger.error(f"[Config] {e}")
        QMessageBox.critical(None, "Configuration error", str(e))
        sys.exit(1)

    # Import after QApplication exists
    from ui.main_window import MainWindow
    window = MainWindow(client=client)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
