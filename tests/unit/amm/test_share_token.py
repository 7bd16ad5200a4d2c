"""Tests for the pool's liquidity share token surface."""

from swap.constants import UINT64_MAX
from tests.helpers import ALICE, BOB, CAROL


class TestShareMetadata:
    def test_metadata(self, market):
        assert market.pool_call("name", caller=ALICE) == "Swap Liquidity"
        assert market.pool_call("symbol", caller=ALICE) == "SWAP"
        assert market.pool_call("decimals", caller=ALICE) == 9

    def test_empty_pool_has_no_supply(self, market):
        assert market.total_supply() == 0
        assert market.shares(ALICE) == 0


class TestShareTransfer:
    """Share transfers move ledger entries but never total_supply."""

    def test_transfer(self, active_market):
        m = active_market

        assert m.pool_call("transfer", BOB, 300, caller=ALICE) is True

        assert m.shares(ALICE) == 700
        assert m.shares(BOB) == 300
        assert m.total_supply() == 1000

    def test_transfer_more_than_held_returns_false(self, active_market):
        m = active_market
        before = m.state()

        assert m.pool_call("transfer", BOB, 1001, caller=ALICE) is False

        assert m.state() == before

    def test_self_transfer_keeps_balance(self, active_market):
        m = active_market
        assert m.pool_call("transfer", ALICE, 400, caller=ALICE) is True
        assert m.shares(ALICE) == 1000

    def test_received_shares_can_be_withdrawn(self, active_market):
        m = active_market
        m.pool_call("transfer", BOB, 500, caller=ALICE)

        result = m.pool_call("withdraw", 500, 1, 1, caller=BOB)

        assert result.tcoin_amount == 500
        assert result.token_amount == 500
        assert m.total_supply() == 500


class TestShareAllowance:
    def test_approve_adds_to_allowance(self, active_market):
        m = active_market
        assert m.pool_call("approve", BOB, 5, caller=ALICE) is True
        assert m.pool_call("approve", BOB, 5, caller=ALICE) is True
        assert m.pool_call("allowance", ALICE, BOB, caller=ALICE) == 10

    def test_approve_overflow_returns_false(self, active_market):
        m = active_market
        m.pool_call("approve", BOB, UINT64_MAX, caller=ALICE)

        assert m.pool_call("approve", BOB, 1, caller=ALICE) is False
        assert m.pool_call("allowance", ALICE, BOB, caller=ALICE) == UINT64_MAX

    def test_transfer_from_spends_allowance(self, active_market):
        m = active_market
        m.pool_call("approve", BOB, 100, caller=ALICE)

        assert m.pool_call("transfer_from", ALICE, CAROL, 60, caller=BOB) is True

        assert m.shares(CAROL) == 60
        assert m.shares(ALICE) == 940
        assert m.pool_call("allowance", ALICE, BOB, caller=BOB) == 40
        assert m.total_supply() == 1000

    def test_transfer_from_beyond_allowance_returns_false(self, active_market):
        m = active_market
        m.pool_call("approve", BOB, 100, caller=ALICE)

        assert m.pool_call("transfer_from", ALICE, CAROL, 101, caller=BOB) is False

        assert m.shares(CAROL) == 0
        assert m.pool_call("allowance", ALICE, BOB, caller=BOB) == 100

    def test_transfer_from_beyond_balance_keeps_allowance(self, active_market):
        """A failed transfer does not consume the allowance."""
        m = active_market
        m.pool_call("approve", BOB, 5000, caller=ALICE)

        assert m.pool_call("transfer_from", ALICE, CAROL, 1001, caller=BOB) is False

        assert m.pool_call("allowance", ALICE, BOB, caller=BOB) == 5000
        assert m.shares(ALICE) == 1000
