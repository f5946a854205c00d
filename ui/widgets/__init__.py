"""
Custom widgets for the Pool Range Estimator UI.
"""

from .price_chart import PriceChartWidget

__all__ = ['PriceChartWidget']
