"""
Pool Data Client

Reads the pool snapshots served by the backend under /data/:
- hourly.json  (poolHourDatas)  -> hourly prices
- daily.json   (poolDayDatas)   -> daily prices + fees
- ticks.json   (ticks)          -> liquidity per tick
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

import requests

from config import DataSourceConfig, get_data_source_config
from src.math.fees import FeeRecord
from src.math.liquidity import LiquidityTick
from src.series import (
    PricePoint,
    normalize_fee_series,
    normalize_price_series,
    normalize_ticks,
    unwrap_records,
)

logger = logging.getLogger(__name__)

HOURLY_KEY = "poolHourDatas"
DAILY_KEY = "poolDayDatas"
TICKS_KEY = "ticks"


class DataSourceError(Exception):
    """Snapshot could not be fetched or contains no data."""
    pass


@dataclass
class DailySnapshot:
    """Daily prices and the fee series from the same daily.json."""
    prices: List[PricePoint] = field(default_factory=list)
    fees: List[FeeRecord] = field(default_factory=list)


class PoolDataClient:
    """
    HTTP client for the pool snapshot files.

    Usage:
        client = PoolDataClient()               # config from .env
        hourly = client.fetch_hourly()
        daily = client.fetch_daily()
        ticks = client.fetch_ticks()
    """

    def __init__(
        self,
        config: Optional[DataSourceConfig] = None,
        session: Optional[requests.Session] = None
    ):
        self.config = config or get_data_source_config()
        self.session = session or requests.Session()

    def _get_records(self, file_name: str, key: str) -> List[dict]:
        """GET one snapshot and unwrap its record array."""
        url = self.config.url_for(file_name)
        logger.debug(f"[API] GET {url}")

        try:
            response = self.session.get(
                url,
                timeout=self.config.timeout,
                proxies=self.config.proxies
            )
        except requests.RequestException as e:
            logger.error(f"[API] Request failed for {url}: {e}")
            raise DataSourceError(f"Failed to fetch {url}: {e}") from e

        logger.debug(f"[API] Response status: {response.status_code}")
        if response.status_code != 200:
            raise DataSourceError(f"HTTP {response.status_code} fetching {url}")

        try:
            payload: Any = response.json()
        except ValueError as e:
            raise DataSourceError(f"{file_name} is not valid JSON: {e}") from e

        records = unwrap_records(payload, key)
        if not records:
            raise DataSourceError(f"{file_name} has no array data")

        logger.info(f"[API] {file_name}: {len(records)} records")
        return records

    def fetch_hourly(self) -> List[PricePoint]:
        records = self._get_records(self.config.hourly_file, HOURLY_KEY)
        return normalize_price_series(
            records,
            self.config.token0_decimals,
            self.config.token1_decimals
        )

    def fetch_daily(self) -> DailySnapshot:
        records = self._get_records(self.config.daily_file, DAILY_KEY)
        return DailySnapshot(
            prices=normalize_price_series(
                records,
                self.config.token0_decimals,
                self.config.token1_decimals
            ),
            fees=normalize_fee_series(records),
        )

    def fetch_ticks(self) -> List[LiquidityTick]:
        records = self._get_records(self.config.ticks_file, TICKS_KEY)
        return normalize_ticks(records)

    def fetch(self, series: str):
        """Fetch a series by name: 'hourly', 'daily' or 'ticks'."""
        fetchers = {
            "hourly": self.fetch_hourly,
            "daily": self.fetch_daily,
            "ticks": self.fetch_ticks,
        }
        if series not in fetchers:
            raise ValueError(f"Unknown series: {series}")
        return fetchers[series]()
