"""Pytest configuration and fixtures."""

import pytest

from swap.host.storage import MemoryStorage
from tests.helpers import ALICE, Market, make_market


@pytest.fixture
def market() -> Market:
    """Fresh market with an empty pool."""
    return make_market()


@pytest.fixture
def active_market() -> Market:
    """Market whose pool was bootstrapped by ALICE with 1000 tcoin / 1000 tokens."""
    m = make_market()
    m.bootstrap(tcoin=1000, tokens=1000, provider=ALICE)
    return m


@pytest.fixture
def memory_storage() -> MemoryStorage:
    """Empty dict-backed storage."""
    return MemoryStorage()
