"""
Background loaders for the pool snapshots.
"""

import logging

from PyQt6.QtCore import QThread, pyqtSignal

from src.pool_data import DataSourceError, PoolDataClient

logger = logging.getLogger(__name__)


class SeriesLoadWorker(QThread):
    """Worker thread fetching one series ('hourly', 'daily' or 'ticks')."""

    loaded = pyqtSignal(str, int, object)   # series, request_id, payload
    failed = pyqtSignal(str, int, str)      # series, request_id, error message

    def __init__(self, client: PoolDataClient, series: str, request_id: int, parent=None):
        super().__init__(parent)
        self.client = client
        self.series = series
        self.request_id = request_id

    def run(self):
        try:
            payload = self.client.fetch(self.series)
            self.loaded.emit(self.series, self.request_id, payload)
        except DataSourceError as e:
            self.failed.emit(self.series, self.request_id, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error loading {self.series}")
            self.failed.emit(self.series, self.request_id, str(e))
