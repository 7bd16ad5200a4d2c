"""Pool pricing and the liquidity pool state machine."""

from swap.amm.pool import LiquidityPool
from swap.amm.pricing import get_input_price, get_output_price

__all__ = [
    "LiquidityPool",
    "get_input_price",
    "get_output_price",
]
