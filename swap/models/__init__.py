"""Models and shared types for the pool."""

from swap.models.results import ReserveSnapshot, WithdrawResult
from swap.models.types import (
    Address,
    Uint64,
    address_from_int,
    is_valid_address,
    normalize_address,
)

__all__ = [
    "Address",
    "ReserveSnapshot",
    "Uint64",
    "WithdrawResult",
    "address_from_int",
    "is_valid_address",
    "normalize_address",
]
