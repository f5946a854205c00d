"""
Snapshot normalization

Turns raw subgraph-style JSON records into immutable series:
- hourly.json -> PricePoint list
- daily.json  -> PricePoint list + FeeRecord list
- ticks.json  -> LiquidityTick list

Malformed records are dropped silently (logged at debug level).
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from config import Timeframe
from src.math.fees import FeeRecord
from src.math.liquidity import LiquidityTick
from src.math.ticks import sqrt_price_x96_to_price

logger = logging.getLogger(__name__)

TIMESTAMP_FIELDS = ("timestamp", "periodStartUnix", "dayStartUnix")


@dataclass(frozen=True)
class PricePoint:
    """Цена пула в момент времени."""
    timestamp: int       # Unix seconds
    price: float


def _to_float(value: Any) -> Optional[float]:
    """Parse a JSON number or numeric string; None if missing or not finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _first_float(record: Dict[str, Any], *field_names: str) -> Optional[float]:
    for field_name in field_names:
        value = _to_float(record.get(field_name))
        if value is not None:
            return value
    return None


def unwrap_records(payload: Any, key: str) -> List[Dict[str, Any]]:
    """
    Accept either a bare JSON array or an object holding the array under key.

    Returns:
        List of records ([] if the payload has no array data)
    """
    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, dict) and isinstance(payload.get(key), list):
        records = payload[key]
    else:
        return []
    return [r for r in records if isinstance(r, dict)]


def extract_timestamp(record: Dict[str, Any]) -> Optional[int]:
    """First finite value among timestamp / periodStartUnix / dayStartUnix."""
    for field_name in TIMESTAMP_FIELDS:
        ts = _to_float(record.get(field_name))
        if ts is not None:
            return int(ts)
    return None


def extract_price(
    record: Dict[str, Any],
    token0_decimals: int = 0,
    token1_decimals: int = 0
) -> Optional[float]:
    """
    Price of a snapshot record.

    Fallback chain: token0Price -> price -> 1/token1Price -> sqrtPrice.

    Returns:
        Price, or None if no field yields a finite value
    """
    price = _to_float(record.get("token0Price"))
    if price is not None:
        return price

    price = _to_float(record.get("price"))
    if price is not None:
        return price

    inverse = _to_float(record.get("token1Price"))
    if inverse is not None and inverse != 0:
        return 1.0 / inverse

    sqrt_price = record.get("sqrtPrice")
    if sqrt_price is not None:
        try:
            price = sqrt_price_x96_to_price(sqrt_price, token0_decimals, token1_decimals)
        except (TypeError, ValueError):
            return None
        return price if math.isfinite(price) else None

    return None


def normalize_price_series(
    records: Sequence[Dict[str, Any]],
    token0_decimals: int = 0,
    token1_decimals: int = 0
) -> List[PricePoint]:
    """
    Build an ascending price series.

    Records without a timestamp or a positive finite price are dropped;
    for duplicate timestamps the last record wins.
    """
    by_ts: Dict[int, PricePoint] = {}
    for record in records:
        ts = extract_timestamp(record)
        price = extract_price(record, token0_decimals, token1_decimals)
        if ts is None or price is None or price <= 0:
            continue
        by_ts[ts] = PricePoint(timestamp=ts, price=price)

    dropped = len(records) - len(by_ts)
    if dropped:
        logger.debug(f"[Series] Dropped {dropped} price record(s)")

    return [by_ts[ts] for ts in sorted(by_ts)]


def normalize_fee_series(records: Sequence[Dict[str, Any]]) -> List[FeeRecord]:
    """Build an ascending fee series; records with missing/invalid feesUSD are dropped."""
    result = []
    for record in records:
        ts = extract_timestamp(record)
        fees = _to_float(record.get("feesUSD"))
        if ts is None or fees is None or fees < 0:
            continue
        result.append(FeeRecord(timestamp=ts, fees_usd=fees))

    dropped = len(records) - len(result)
    if dropped:
        logger.debug(f"[Series] Dropped {dropped} fee record(s)")

    result.sort(key=lambda r: r.timestamp)
    return result


def normalize_ticks(records: Sequence[Dict[str, Any]]) -> List[LiquidityTick]:
    """Build the tick snapshot; a record with any non-finite field is dropped."""
    result = []
    for record in records:
        lower = _first_float(record, "priceLowerUSD", "priceLower")
        upper = _first_float(record, "priceUpperUSD", "priceUpper")
        usd_value = _to_float(record.get("usdValue"))
        if lower is None or upper is None or usd_value is None or usd_value < 0:
            continue
        result.append(LiquidityTick(price_lower=lower, price_upper=upper, usd_value=usd_value))

    dropped = len(records) - len(result)
    if dropped:
        logger.debug(f"[Series] Dropped {dropped} tick record(s)")

    return result


def latest_price(points: Optional[Sequence[PricePoint]]) -> Optional[float]:
    """Most recent price, or None for an empty/missing series."""
    if not points:
        return None
    return points[-1].price


def select_window(
    timeframe: Timeframe,
    hourly: Optional[Sequence[PricePoint]],
    daily: Optional[Sequence[PricePoint]]
) -> List[PricePoint]:
    """Trailing timeframe.count points of the timeframe's source series."""
    source = hourly if timeframe.source == "hourly" else daily
    if not source:
        return []
    return list(source[-timeframe.count:])
