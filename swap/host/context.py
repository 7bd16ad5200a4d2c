"""Message context passed explicitly into every entry operation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class MessageContext(Protocol):
    """What the host tells a contract about the current call.

    ``value`` has already been credited to the contract's balance when the
    entry operation starts, so ``self_balance() - value`` is the pre-call
    native reserve.
    """

    @property
    def caller(self) -> str: ...

    @property
    def value(self) -> int: ...

    @property
    def self_address(self) -> str: ...

    def self_balance(self) -> int: ...

    def transfer_native(self, to: str, amount: int) -> None: ...


@dataclass(frozen=True)
class CallContext:
    """MessageContext backed by host callbacks.

    Attributes:
        caller: Address that invoked the call
        value: Native amount attached to the call
        self_address: Address of the contract being called
        balance_of: Reads a native balance from the host
        send: Moves native coins out of the contract
    """

    caller: str
    value: int
    self_address: str
    balance_of: Callable[[str], int]
    send: Callable[[str, str, int], None]

    def self_balance(self) -> int:
        return self.balance_of(self.self_address)

    def transfer_native(self, to: str, amount: int) -> None:
        self.send(self.self_address, to, amount)
