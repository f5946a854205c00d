"""
Configuration for Pool Range Estimator

Where the pool snapshots come from, chart timeframes, and the defaults
used by the range controller and the return calculator.

Backend location can be overridden with a .env file:
    POOL_DATA_URL=http://localhost:3000/data/
    POOL_DATA_TIMEOUT=10
    POOL_DATA_PROXY=http://127.0.0.1:8080
    POOL_TOKEN0_DECIMALS=6
    POOL_TOKEN1_DECIMALS=18
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Literal, Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass
class DataSourceConfig:
    """Where the JSON snapshots are served from."""
    base_url: str
    timeout: float = 10.0
    proxy: Optional[str] = None
    hourly_file: str = "hourly.json"
    daily_file: str = "daily.json"
    ticks_file: str = "ticks.json"
    # Only used when a price has to be derived from sqrtPrice
    token0_decimals: int = 0
    token1_decimals: int = 0

    def url_for(self, file_name: str) -> str:
        """Join base_url and a snapshot file name."""
        return self.base_url.rstrip("/") + "/" + file_name.lstrip("/")

    @property
    def proxies(self) -> Dict[str, str]:
        """Proxy mapping in the format requests expects."""
        if not self.proxy:
            return {}
        return {"http": self.proxy, "https": self.proxy}


@dataclass(frozen=True)
class Timeframe:
    """Chart window over one of the two price series."""
    id: str
    label: str
    source: Literal["hourly", "daily"]
    count: int


# ============================================================
# DATA SOURCE
# ============================================================

DEFAULT_DATA_URL = "http://localhost:3000/data/"
DEFAULT_TIMEOUT = 10.0

# ============================================================
# TIMEFRAMES
# ============================================================

TIMEFRAMES: List[Timeframe] = [
    Timeframe(id="24h", label="24 Hours", source="hourly", count=24),
    Timeframe(id="7d", label="7 Days", source="hourly", count=7 * 24),
    Timeframe(id="30d", label="30 Days", source="daily", count=30),
    Timeframe(id="6m", label="6 Months", source="daily", count=182),
    Timeframe(id="1y", label="Yearly", source="daily", count=365),
]

DEFAULT_TIMEFRAME = "7d"

# ============================================================
# RANGE / ESTIMATE DEFAULTS
# ============================================================

BOUND_LOWER_FACTOR = 0.95   # bounds seeded/reset at price -5% ...
BOUND_UPPER_FACTOR = 1.05   # ... and +5%
DRAG_TOLERANCE_PX = 6       # pointer must be closer than this to grab a bound
DEFAULT_LOWER_BOUND = -1000.0
DEFAULT_UPPER_BOUND = 1000.0
DEFAULT_DEPOSIT_USD = 1000.0

# Y-axis padding: data range first, then data + bounds
DATA_PAD_FRAC = 0.06
BOUNDS_PAD_FRAC = 0.04
ZOOM_STEP = 1.1             # one wheel notch


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got: {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw!r}")


def get_data_source_config() -> DataSourceConfig:
    """Build the data source configuration from the environment."""
    return DataSourceConfig(
        base_url=os.getenv("POOL_DATA_URL") or DEFAULT_DATA_URL,
        timeout=_env_float("POOL_DATA_TIMEOUT", DEFAULT_TIMEOUT),
        proxy=os.getenv("POOL_DATA_PROXY") or None,
        token0_decimals=_env_int("POOL_TOKEN0_DECIMALS", 0),
        token1_decimals=_env_int("POOL_TOKEN1_DECIMALS", 0),
    )


def get_timeframe(timeframe_id: str) -> Timeframe:
    """Получение таймфрейма по id. Unknown ids fall back to the default."""
    for tf in TIMEFRAMES:
        if tf.id == timeframe_id:
            return tf
    return get_timeframe(DEFAULT_TIMEFRAME)
