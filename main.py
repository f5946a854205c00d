"""
Pool Range Estimator - console calculator

Загружает снимки пула, затем спрашивает диапазон и депозит и печатает
оценку комиссий и APR. Same numbers as the desktop app (run_ui.py).
"""

import logging
from typing import Optional

from config import DEFAULT_DEPOSIT_USD
from src.formatting import fmt_percent, fmt_usd0, fmt_usd2, format_price
from src.pool_data import DataSourceError, PoolDataClient
from src.pool_session import SERIES_NAMES, PoolSession

logger = logging.getLogger(__name__)


def load_session(client: PoolDataClient) -> PoolSession:
    """
    Fetch all series into a new session.

    A failed series is reported and the rest keep loading.
    """
    session = PoolSession()
    for series in SERIES_NAMES:
        request_id = session.begin_load(series)
        try:
            payload = client.fetch(series)
        except DataSourceError as e:
            session.report_error(series, str(e))
            print(f"Failed to load {series}: {e}")
            continue

        if series == "hourly":
            session.apply_hourly(request_id, payload)
        elif series == "daily":
            session.apply_daily(request_id, payload.prices, payload.fees)
        else:
            session.apply_ticks(request_id, payload)
    return session


def prompt_float(prompt: str, default: Optional[float] = None) -> Optional[float]:
    """Ask for a number; empty input returns the default."""
    suffix = f" [{format_price(default)}]" if default is not None else ""
    while True:
        raw = input(f"{prompt}{suffix}: ").strip().replace(",", "")
        if not raw:
            return default
        try:
            return float(raw)
        except ValueError:
            print("Введите число")


def print_summary(session: PoolSession):
    """Current price and trailing pool fees."""
    print("\n" + "=" * 70)
    print("POOL SUMMARY")
    print("=" * 70)
    print(f"Current price:     ${format_price(session.current_price)}")
    summary = session.fee_summary
    print(f"Fees last 24h:     {fmt_usd0(summary.last_1d)}")
    print(f"Fees last 7 days:  {fmt_usd0(summary.last_7d)}")
    print(f"Fees last 30 days: {fmt_usd0(summary.last_30d)}")


def print_estimate(session: PoolSession, deposit: Optional[float]):
    """Bounds, liquidity in range and the estimate for a deposit."""
    bounds = session.get_bounds()
    result = session.calculate(deposit)

    print("\n" + "=" * 70)
    print("ESTIMATE")
    print("=" * 70)
    print(f"Range:              {fmt_usd2(bounds.lower)} - {fmt_usd2(bounds.upper)}")
    print(f"Liquidity in range: {fmt_usd0(session.liquidity_in_range())}")
    print(f"Deposit:            {fmt_usd2(deposit)}")
    print(f"Daily fees:         {fmt_usd0(result.daily_fees_usd)}")
    print(f"Weekly fees:        {fmt_usd0(result.weekly_fees_usd)}")
    print(f"APR:                {fmt_percent(result.apr_percent)}")


def interactive_calculator(session: PoolSession):
    """Ask for a range and a deposit, print the estimate, repeat on request."""
    while True:
        bounds = session.get_bounds()
        upper = prompt_float("\nUpper bound ($)", bounds.upper)
        lower = prompt_float("Lower bound ($)", bounds.lower)
        session.set_bounds(lower=lower, upper=upper)

        deposit = prompt_float("Deposit ($)", DEFAULT_DEPOSIT_USD)
        print_estimate(session, deposit)

        again = input("\nПересчитать с другими параметрами? (y/n): ")
        if again.lower() != "y":
            break


def main():
    """Главная функция."""
    logging.basicConfig(
        level=logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )

    print("""
    Pool Range Estimator
    Concentrated liquidity fee / APR calculator
    """)

    client = PoolDataClient()
    print(f"Loading pool data from {client.config.base_url} ...")
    session = load_session(client)

    print_summary(session)
    interactive_calculator(session)


if __name__ == "__main__":
    main()
