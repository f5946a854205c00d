from .ticks import sqrt_price_x96_to_price, Q96
from .liquidity import LiquidityTick, normalize_range, tick_overlaps_range, aggregate_liquidity
from .estimate import EstimateResult, estimate_returns
from .fees import FeeRecord, FeeSummary, summarize_fees
