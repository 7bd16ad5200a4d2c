"""Constant-product liquidity pool engine with exact integer pricing."""

from swap.amm.pool import LiquidityPool
from swap.amm.pricing import get_input_price, get_output_price
from swap.config import DEFAULT_POOL_CONFIG, PoolConfig

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_POOL_CONFIG",
    "LiquidityPool",
    "PoolConfig",
    "__version__",
    "get_input_price",
    "get_output_price",
]
