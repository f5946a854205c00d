"""
Uniswap V3 price conversion

Основная формула:
- price = (sqrtPriceX96 / 2^96)^2 * 10^(decimals0 - decimals1)

This is a float approximation good enough for charting and range
estimates; it does not reproduce on-chain rounding.
"""

from typing import Union

# Константы
Q96 = 2 ** 96


def sqrt_price_x96_to_price(
    sqrt_price_x96: Union[int, str],
    token0_decimals: int = 0,
    token1_decimals: int = 0
) -> float:
    """
    Конвертация sqrtPriceX96 в цену token0 в единицах token1.

    price = (sqrtPriceX96 / 2^96)^2, scaled by the decimals difference
    so that e.g. a USDC(6)/WETH(18) pool yields a human-readable price.

    Args:
        sqrt_price_x96: sqrtPriceX96 as int or decimal string (subgraph format)
        token0_decimals: Decimals of token0
        token1_decimals: Decimals of token1

    Returns:
        Price (float)

    Raises:
        ValueError: If sqrt_price_x96 is negative, not finite, or the
            price does not fit in a float
    """
    try:
        value = int(sqrt_price_x96)
    except OverflowError:
        raise ValueError(f"sqrtPriceX96 is not finite: {sqrt_price_x96!r}")
    if value < 0:
        raise ValueError("sqrtPriceX96 must be non-negative")

    try:
        sqrt_price = value / Q96
        return (sqrt_price ** 2) * (10 ** (token0_decimals - token1_decimals))
    except OverflowError:
        raise ValueError("sqrtPriceX96 out of float range")
