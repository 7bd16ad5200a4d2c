"""Pool parameters and storage layout.

Centralizes the fee, share-token metadata and the storage cell ids used
by the liquidity pool.
"""

UINT64_MAX = 2**64 - 1

# 0.3% swap fee: input is scaled by FEE_NUMERATOR / FEE_DENOMINATOR
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Minimum native amount (1 tcoin at 9 decimals) to bootstrap an empty pool
MIN_BOOTSTRAP_TCOIN = 1_000_000_000

# Liquidity share token metadata
SHARE_NAME = "Swap Liquidity"
SHARE_SYMBOL = "SWAP"
SHARE_DECIMALS = 9

# Storage layout (map ids and scalar cell ids)
BALANCE_MAP_ID = 1
ALLOWANCE_MAP_ID = 2
TOTAL_SUPPLY_CELL = 3
LOCK_CELL = 4
