"""Test helpers module for shared test utilities.

- constants: Accounts and common amounts
- factories: Market factory (chain + token + pool + funded accounts)
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    BOB_TOKENS,
    CAROL,
    MALLORY,
    NATIVE_FUNDING,
    POOL_ALLOWANCE,
    TEST_MIN_BOOTSTRAP,
)
from tests.helpers.factories import Market, make_market

__all__ = [
    "ALICE",
    "BOB",
    "BOB_TOKENS",
    "CAROL",
    "MALLORY",
    "Market",
    "NATIVE_FUNDING",
    "POOL_ALLOWANCE",
    "TEST_MIN_BOOTSTRAP",
    "make_market",
]
