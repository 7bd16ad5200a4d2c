"""Plain fungible token used as the pool's counterpart asset."""

from __future__ import annotations

from swap.contracts.ledger import LedgerToken
from swap.host.context import MessageContext
from swap.host.storage import Storage
from swap.models.types import require_address, require_uint64

DEFAULT_TOTAL_SUPPLY = 1_000_000_000_000_000_000


class BasicToken(LedgerToken):
    """Fixed-supply token whose whole supply starts with ``owner``.

    ``approve`` overwrites the allowance, unlike the pool's share token
    which adds to it.
    """

    def __init__(
        self,
        storage: Storage,
        owner: str,
        name: str = "ABC Coin",
        symbol: str = "ABC",
        decimals: int = 9,
        supply: int = DEFAULT_TOTAL_SUPPLY,
    ) -> None:
        super().__init__(storage)
        self._name = name
        self._symbol = symbol
        self._decimals = decimals
        self._supply = require_uint64("supply", supply)
        self._balances.set(require_address("owner", owner), self._supply)

    def name(self, ctx: MessageContext) -> str:
        return self._name

    def symbol(self, ctx: MessageContext) -> str:
        return self._symbol

    def decimals(self, ctx: MessageContext) -> int:
        return self._decimals

    def total_supply(self, ctx: MessageContext) -> int:
        return self._supply

    def approve(self, ctx: MessageContext, spender: str, value: int) -> bool:
        value = require_uint64("value", value)
        self._allowances.nested(ctx.caller).set(require_address("spender", spender), value)
        return True
