"""Tests for LiquidityPool driven directly through its capabilities.

No Chain is involved: storage is a MemoryStorage, the token is a FakeToken
and every call gets a hand-built FakeContext. Nothing is rolled back on
failure here; that is the host's job.
"""

import pytest

from swap.amm.pool import LiquidityPool
from swap.amm.pricing import get_input_price
from swap.config import PoolConfig
from swap.errors import ExternalCallFailure, PreconditionViolation
from swap.host.context import MessageContext
from swap.host.storage import MemoryStorage
from swap.host.token import Token
from swap.models.results import WithdrawResult
from tests.helpers import ALICE, BOB
from tests.helpers.fakes import POOL, FakeContext, FakeToken


def bootstrapped_pool(tcoin: int = 1000, tokens: int = 500):
    """Pool holding ``tcoin`` native and ``tokens`` tokens, all shares with ALICE."""
    token = FakeToken()
    pool = LiquidityPool(MemoryStorage(), token, PoolConfig(min_bootstrap_tcoin=1000))
    pool.deposit(FakeContext(caller=ALICE, value=tcoin, balance=tcoin), 0, tokens)
    return pool, token


class TestCapabilities:
    def test_fakes_satisfy_protocols(self):
        assert isinstance(FakeContext(caller=ALICE), MessageContext)
        assert isinstance(FakeToken(), Token)


class TestPoolWithFakes:
    def test_bootstrap_pulls_tokens_last(self):
        pool, token = bootstrapped_pool()

        assert token.calls == [("transfer_from", ALICE, POOL, 500)]
        assert token.pool_balance == 500
        assert pool.total_supply(FakeContext(caller=ALICE)) == 1000
        assert pool.balance_of(FakeContext(caller=ALICE), ALICE) == 1000

    def test_reserves_exclude_attached_value(self):
        pool, _ = bootstrapped_pool()
        ctx = FakeContext(caller=BOB, value=100, balance=1100)

        quote = pool.get_tcoin_to_token_input_price(ctx, 100)

        assert quote == get_input_price(100, 1000, 500)

    def test_tcoin_to_token_pushes_tokens(self):
        pool, token = bootstrapped_pool()
        expected = get_input_price(100, 1000, 500)

        bought = pool.tcoin_to_token_swap_input(
            FakeContext(caller=BOB, value=100, balance=1100), 1
        )

        assert bought == expected
        assert token.calls[-1] == ("transfer", BOB, expected)

    def test_token_to_tcoin_pays_before_pulling(self):
        pool, token = bootstrapped_pool()
        ctx = FakeContext(caller=BOB, balance=1000)
        expected = get_input_price(100, 500, 1000)

        bought = pool.token_to_tcoin_swap_input(ctx, 100, 1)

        assert bought == expected
        assert ctx.sent == [(BOB, expected)]
        assert token.calls[-1] == ("transfer_from", BOB, POOL, 100)

    def test_withdraw(self):
        pool, token = bootstrapped_pool()
        ctx = FakeContext(caller=ALICE, balance=1000)

        result = pool.withdraw(ctx, 400, 1, 1)

        assert result == WithdrawResult(tcoin_amount=400, token_amount=200)
        assert ctx.sent == [(ALICE, 400)]
        assert token.calls[-1] == ("transfer", ALICE, 200)
        assert pool.total_supply(ctx) == 600

    def test_rejected_token_call_raises(self):
        token = FakeToken(accept=False)
        pool = LiquidityPool(MemoryStorage(), token, PoolConfig(min_bootstrap_tcoin=1000))

        with pytest.raises(ExternalCallFailure):
            pool.deposit(FakeContext(caller=ALICE, value=1000, balance=1000), 0, 500)

        assert token.calls == [("transfer_from", ALICE, POOL, 500)]

    def test_value_above_balance_rejected(self):
        """A context claiming more attached value than the pool holds is refused."""
        pool, _ = bootstrapped_pool()
        with pytest.raises(PreconditionViolation, match="exceeds the pool balance"):
            pool.get_tcoin_to_token_input_price(
                FakeContext(caller=BOB, value=100, balance=50), 100
            )
