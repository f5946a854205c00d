"""
Shared fixtures for all tests.
"""

import pytest

from src.axis import ValueAxis
from src.math.fees import FeeRecord
from src.math.liquidity import LiquidityTick
from src.range_controller import RangeBoundsController
from src.series import PricePoint

HOUR = 3600
DAY = 86400
T0 = 1_700_000_000


@pytest.fixture
def axis():
    """
    Axis where value == 100 - y.

    Pixels 0..100 map to values 100..0.
    """
    ax = ValueAxis(pixel_top=0, pixel_bottom=100)
    ax.set_data_range(0.0, 100.0)
    return ax


@pytest.fixture
def controller(axis):
    """Controller with bounds 40 / 60 on the test axis (lines at y=60 / y=40)."""
    return RangeBoundsController(lower=40.0, upper=60.0, axis=axis)


@pytest.fixture
def hourly_points():
    """48 hourly prices ending at 2000."""
    return [PricePoint(timestamp=T0 + i * HOUR, price=1953.0 + i) for i in range(48)]


@pytest.fixture
def daily_points():
    return [PricePoint(timestamp=T0 + i * DAY, price=1900.0 + i * 10) for i in range(10)]


@pytest.fixture
def fee_records():
    """10 daily fee records: 10, 20, ..., 100."""
    return [FeeRecord(timestamp=T0 + i * DAY, fees_usd=10.0 * (i + 1)) for i in range(10)]


@pytest.fixture
def ticks():
    """Ticks around 2000; one with reversed interval order."""
    return [
        LiquidityTick(price_lower=1800.0, price_upper=1900.0, usd_value=1000.0),
        LiquidityTick(price_lower=1900.0, price_upper=2000.0, usd_value=3000.0),
        LiquidityTick(price_lower=2100.0, price_upper=2000.0, usd_value=5000.0),
        LiquidityTick(price_lower=2100.0, price_upper=2200.0, usd_value=2000.0),
        LiquidityTick(price_lower=2500.0, price_upper=2600.0, usd_value=700.0),
    ]

