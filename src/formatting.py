"""
Display formatting for prices, USD amounts and timestamps.

Every formatter renders None / NaN / inf as PLACEHOLDER so an unavailable
value never shows up as 0.
"""

import math
from datetime import datetime
from typing import Optional

PLACEHOLDER = "—"


def _finite(n: Optional[float]) -> bool:
    return n is not None and math.isfinite(n)


def fmt_int(n: Optional[float]) -> str:
    """1234567.8 -> '1,234,568'"""
    if not _finite(n):
        return PLACEHOLDER
    return f"{n:,.0f}"


def fmt_usd0(n: Optional[float]) -> str:
    """1234.5 -> '$1,235'"""
    if not _finite(n):
        return PLACEHOLDER
    return f"${fmt_int(n)}"


def fmt_usd2(n: Optional[float]) -> str:
    """-1234.5 -> '-$1,234.50'"""
    if not _finite(n):
        return PLACEHOLDER
    sign = "-" if n < 0 else ""
    return f"{sign}${abs(n):,.2f}"


def fmt_percent(n: Optional[float]) -> str:
    """364.2 -> '364%'"""
    if not _finite(n):
        return PLACEHOLDER
    return f"{fmt_int(n)}%"


def format_price(price: Optional[float]) -> str:
    """Format price without scientific notation, handling sub-dollar prices."""
    if not _finite(price):
        return PLACEHOLDER
    if price == 0:
        return "0"
    abs_price = abs(price)
    if abs_price >= 1000:
        return f"{price:,.0f}"
    elif abs_price >= 1:
        return f"{price:,.2f}"
    elif abs_price >= 0.0001:
        return f"{price:.6f}".rstrip('0').rstrip('.')
    else:
        return f"{price:.10f}".rstrip('0').rstrip('.')


def format_hour(unix_sec: int) -> str:
    """Local time 'MM/DD HH' for hourly axis labels."""
    return datetime.fromtimestamp(unix_sec).strftime("%m/%d %H")


def format_day(unix_sec: int) -> str:
    """Local date 'MM/DD/YY' for daily axis labels."""
    return datetime.fromtimestamp(unix_sec).strftime("%m/%d/%y")


def parse_number(text: Optional[str]) -> Optional[float]:
    """
    Parse user input such as '$ 1,250.5'.

    Returns:
        Float value, or None if the text is not a finite number
    """
    if text is None:
        return None
    cleaned = str(text).replace(",", "").replace("$", "").strip()
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None
