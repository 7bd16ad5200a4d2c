"""Remote token capability."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Token(Protocol):
    """Token contract as seen by the pool.

    Calls are made with the pool as the message caller. ``transfer`` and
    ``transfer_from`` return False for recoverable failures (insufficient
    balance or allowance); the pool turns that into a rejection.
    """

    def balance_of(self, owner: str) -> int:
        """Token balance of ``owner``."""
        ...

    def transfer(self, to: str, value: int) -> bool:
        """Move ``value`` from the pool to ``to``."""
        ...

    def transfer_from(self, owner: str, to: str, value: int) -> bool:
        """Move ``value`` from ``owner`` to ``to`` using the pool's allowance."""
        ...
