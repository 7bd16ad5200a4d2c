"""Integer arithmetic for pool accounting.

This package provides the primitives the pricing math relies on:
- Uint256: 256-bit fixed-width unsigned integer over 64-bit limbs
- SafeU64: checked uint64 for ledger amounts
"""

from swap.math.safe_u64 import SafeU64
from swap.math.uint256 import U, Uint256

__all__ = ["SafeU64", "U", "Uint256"]
