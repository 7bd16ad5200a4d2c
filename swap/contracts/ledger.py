"""Fungible uint64 ledger shared by the token contracts.

Balances live in map 1 and allowances in the nested map 2 of the
contract's storage. Transfers that the sender cannot cover return False
rather than raising, which is the token capability's convention for
recoverable failures.
"""

from __future__ import annotations

import structlog

from swap.constants import ALLOWANCE_MAP_ID, BALANCE_MAP_ID
from swap.host.context import MessageContext
from swap.host.storage import Storage, StorageMap
from swap.math.safe_u64 import SafeU64
from swap.models.types import require_address, require_uint64

logger = structlog.get_logger()


class LedgerToken:
    """Balance and allowance bookkeeping over a Storage capability."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage
        self._balances = StorageMap(storage, BALANCE_MAP_ID)
        self._allowances = StorageMap(storage, ALLOWANCE_MAP_ID)

    def balance_of(self, ctx: MessageContext, owner: str) -> int:
        return self._balances.get(require_address("owner", owner))

    def allowance(self, ctx: MessageContext, owner: str, spender: str) -> int:
        owner = require_address("owner", owner)
        spender = require_address("spender", spender)
        return self._allowances.nested(owner).get(spender)

    def transfer(self, ctx: MessageContext, to: str, value: int) -> bool:
        """Move ``value`` from the caller to ``to``."""
        value = require_uint64("value", value)
        return self._transfer(ctx.caller, require_address("to", to), value)

    def transfer_from(self, ctx: MessageContext, owner: str, to: str, value: int) -> bool:
        """Move ``value`` from ``owner`` to ``to``, spending the caller's allowance."""
        value = require_uint64("value", value)
        owner = require_address("owner", owner)
        to = require_address("to", to)
        allowances = self._allowances.nested(owner)
        remaining = SafeU64(allowances.get(ctx.caller)).checked_sub(value)
        if remaining is None:
            logger.debug(
                "allowance_insufficient",
                owner=owner,
                spender=ctx.caller,
                requested=value,
            )
            return False
        if not self._transfer(owner, to, value):
            return False
        allowances.set(ctx.caller, remaining.value)
        return True

    def _transfer(self, sender: str, to: str, value: int) -> bool:
        remaining = SafeU64(self._balances.get(sender)).checked_sub(value)
        if remaining is None:
            logger.debug("balance_insufficient", owner=sender, requested=value)
            return False
        self._balances.set(sender, remaining.value)
        # Read after the debit so a self-transfer leaves the balance unchanged
        credited = SafeU64(self._balances.get(to)).checked_add(value)
        if credited is None:
            self._balances.set(sender, remaining.value + value)
            return False
        self._balances.set(to, credited.value)
        return True
