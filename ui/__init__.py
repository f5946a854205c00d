"""
Pool Range Estimator UI Package
PyQt6-based desktop application for estimating concentrated liquidity returns.
"""

from .main_window import MainWindow

__all__ = ['MainWindow']
