"""Pool configuration."""

import os
from dataclasses import dataclass

from swap.constants import MIN_BOOTSTRAP_TCOIN, SHARE_DECIMALS, SHARE_NAME, SHARE_SYMBOL


@dataclass(frozen=True)
class PoolConfig:
    """Centralized configuration for a liquidity pool.

    Attributes:
        min_bootstrap_tcoin: Minimum native amount the first depositor must
            attach (default: 1,000,000,000 = 1 tcoin at 9 decimals)
        share_name: Name of the liquidity share token
        share_symbol: Symbol of the liquidity share token
        share_decimals: Decimals of the liquidity share token
    """

    min_bootstrap_tcoin: int = MIN_BOOTSTRAP_TCOIN

    share_name: str = SHARE_NAME
    share_symbol: str = SHARE_SYMBOL
    share_decimals: int = SHARE_DECIMALS

    @classmethod
    def from_env(cls) -> "PoolConfig":
        """Build a config from environment variables.

        - SWAP_MIN_BOOTSTRAP_TCOIN: Minimum bootstrap deposit (default: 1e9)
        """
        return cls(
            min_bootstrap_tcoin=int(
                os.environ.get("SWAP_MIN_BOOTSTRAP_TCOIN", str(MIN_BOOTSTRAP_TCOIN))
            ),
        )


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
