"""
Tests for src.math.estimate: fee / APR projection.
"""

import math

import pytest

from src.math.estimate import EstimateResult, estimate_returns


class TestEstimateReturns:
    """Tests for estimate_returns."""

    def test_reference_values(self):
        """deposit 1000, L 10000, fees 700 -> 70/week, 10/day, 364% APR."""
        result = estimate_returns(1000.0, 10000.0, 700.0)

        assert result.available
        assert result.weekly_fees_usd == pytest.approx(70.0)
        assert result.daily_fees_usd == pytest.approx(10.0)
        assert result.apr_percent == pytest.approx(364.0)

    def test_formulas(self):
        deposit, liquidity, fees = 2500.0, 1_250_000.0, 43_210.0
        result = estimate_returns(deposit, liquidity, fees)

        weekly = (deposit / liquidity) * fees
        assert result.weekly_fees_usd == weekly
        assert result.daily_fees_usd == weekly / 7
        assert result.apr_percent == (fees / liquidity) * 52 * 100

    def test_apr_independent_of_deposit(self):
        small = estimate_returns(10.0, 50_000.0, 900.0)
        large = estimate_returns(1_000_000.0, 50_000.0, 900.0)
        assert small.apr_percent == large.apr_percent

    def test_zero_fees_is_defined_zero(self):
        """Zero fee history is a computed zero, not unavailable."""
        result = estimate_returns(1000.0, 10000.0, 0.0)
        assert result.available
        assert result.weekly_fees_usd == 0.0
        assert result.apr_percent == 0.0

    @pytest.mark.parametrize(
        "deposit, liquidity, fees",
        [
            (1000.0, 0.0, 700.0),
            (1000.0, -5.0, 700.0),
            (0.0, 10000.0, 700.0),
            (-1.0, 10000.0, 700.0),
            (1000.0, 10000.0, -0.01),
            (None, 10000.0, 700.0),
            (1000.0, None, 700.0),
            (1000.0, 10000.0, None),
            (math.nan, 10000.0, 700.0),
            (1000.0, math.inf, 700.0),
            (1000.0, 10000.0, math.nan),
        ],
        ids=[
            "zero-liquidity", "negative-liquidity", "zero-deposit", "negative-deposit",
            "negative-fees", "no-deposit", "no-liquidity", "no-fees",
            "nan-deposit", "inf-liquidity", "nan-fees",
        ],
    )
    def test_invalid_inputs_unavailable(self, deposit, liquidity, fees):
        result = estimate_returns(deposit, liquidity, fees)
        assert result == EstimateResult.unavailable()
        assert not result.available


class TestEstimateResult:
    """Tests for EstimateResult."""

    def test_unavailable_fields_are_none(self):
        result = EstimateResult.unavailable()
        assert result.daily_fees_usd is None
        assert result.weekly_fees_usd is None
        assert result.apr_percent is None

    def test_partial_is_not_available(self):
        assert not EstimateResult(daily_fees_usd=1.0, weekly_fees_usd=None, apr_percent=1.0).available

    def test_frozen(self):
        result = EstimateResult.unavailable()
        with pytest.raises(AttributeError):
            result.apr_percent = 1.0
