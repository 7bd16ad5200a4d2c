"""In-memory host for running contracts without a live node.

Chain keeps native balances and one MemoryStorage per deployed contract,
and executes entry operations with the host's call semantics:

- attached value is credited to the callee before the operation runs
- the operation receives a fresh CallContext as its first argument
- if the operation raises, every balance and storage change made during
  that call (including nested calls) is rolled back before re-raising

Contracts call each other through Chain.call as well (see RemoteToken), so
nested calls and reentrancy behave as they would on the host.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from typing import Any

import structlog

from swap.errors import InsufficientBalance, PreconditionViolation
from swap.host.context import CallContext
from swap.host.storage import MemoryStorage
from swap.models.types import normalize_address

logger = structlog.get_logger()

ContractFactory = Callable[["Chain", str, MemoryStorage], Any]


class Chain:
    """Native ledger plus deployed contracts."""

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._storages: dict[str, MemoryStorage] = {}
        self._contracts: dict[str, Any] = {}
        self._nonce = 0
        self._depth = 0

    @property
    def depth(self) -> int:
        """Number of calls currently executing (0 outside any call)."""
        return self._depth

    def new_address(self, label: str = "account") -> str:
        """Derive a fresh, deterministic address."""
        self._nonce += 1
        digest = hashlib.sha256(f"{label}:{self._nonce}".encode()).hexdigest()
        return "0x" + digest

    def deploy(self, factory: ContractFactory, label: str = "contract") -> str:
        """Deploy a contract and return its address.

        Args:
            factory: Called with (chain, address, storage); returns the
                contract object whose methods become entry operations
            label: Prefix used when deriving the address
        """
        address = self.new_address(label)
        storage = MemoryStorage()
        self._storages[address] = storage
        self._contracts[address] = factory(self, address, storage)
        logger.debug("contract_deployed", address=address, label=label)
        return address

    def contract(self, address: str) -> Any:
        return self._contracts[normalize_address(address)]

    def storage(self, address: str) -> MemoryStorage:
        return self._storages[normalize_address(address)]

    def balance_of(self, address: str) -> int:
        """Native balance of an account or contract."""
        return self._balances.get(normalize_address(address), 0)

    def mint_native(self, address: str, amount: int) -> None:
        """Credit native coins out of thin air (genesis / test funding)."""
        address = normalize_address(address)
        self._balances[address] = self._balances.get(address, 0) + amount

    def send_native(self, sender: str, to: str, amount: int) -> None:
        """Move native coins between accounts.

        Raises:
            InsufficientBalance: If sender holds less than amount
        """
        sender, to = normalize_address(sender), normalize_address(to)
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"Native balance of {sender} is {balance}, cannot send {amount}"
            )
        self._balances[sender] = balance - amount
        self._balances[to] = self._balances.get(to, 0) + amount

    def call(self, address: str, method: str, *args: Any, caller: str, value: int = 0) -> Any:
        """Run an entry operation atomically.

        Args:
            address: Contract to call
            method: Entry operation name
            *args: Arguments after the message context
            caller: Message caller
            value: Native amount attached to the call

        Returns:
            Whatever the entry operation returns

        Raises:
            PreconditionViolation: If the address holds no contract or the
                method does not exist
            Any error raised by the operation, after rolling back
        """
        address = normalize_address(address)
        caller = normalize_address(caller)
        contract = self._contracts.get(address)
        if contract is None:
            raise PreconditionViolation(f"No contract at {address}")
        entry = getattr(contract, method, None)
        if entry is None or method.startswith("_") or not callable(entry):
            raise PreconditionViolation(f"Contract {address} has no entry operation {method!r}")

        balances = dict(self._balances)
        storages = {addr: storage.snapshot() for addr, storage in self._storages.items()}
        self._depth += 1
        try:
            if value:
                self.send_native(caller, address, value)
            ctx = CallContext(
                caller=caller,
                value=value,
                self_address=address,
                balance_of=self.balance_of,
                send=self.send_native,
            )
            return entry(ctx, *args)
        except Exception as err:
            self._balances = balances
            for addr, cells in storages.items():
                self._storages[addr].restore(cells)
            logger.info(
                "call_reverted",
                contract=address,
                method=method,
                caller=caller,
                value=value,
                depth=self._depth,
                error=type(err).__name__,
                reason=str(err),
            )
            raise
        finally:
            self._depth -= 1


class RemoteToken:
    """Token capability that routes calls to a token contract on a Chain.

    Every call is made with ``caller`` (the contract holding this handle)
    as the message caller.
    """

    def __init__(self, chain: Chain, token_address: str, caller: str) -> None:
        self._chain = chain
        self.address = normalize_address(token_address)
        self._caller = normalize_address(caller)

    def balance_of(self, owner: str) -> int:
        return self._chain.call(self.address, "balance_of", owner, caller=self._caller)

    def transfer(self, to: str, value: int) -> bool:
        return self._chain.call(self.address, "transfer", to, value, caller=self._caller)

    def transfer_from(self, owner: str, to: str, value: int) -> bool:
        return self._chain.call(
            self.address, "transfer_from", owner, to, value, caller=self._caller
        )
