"""Fakes for driving LiquidityPool without a Chain.

Usage:
    from tests.helpers.fakes import FakeContext, FakeToken

    token = FakeToken(pool_balance=1000)
    ctx = FakeContext(caller=ALICE, value=100, self_address=POOL, balance=1100)
"""

from dataclasses import dataclass, field

POOL = "0x" + "99" * 32


@dataclass
class FakeToken:
    """Token capability with a scripted pool balance and call results.

    Usage:
        token = FakeToken(pool_balance=1000)
        token = FakeToken(pool_balance=1000, accept=False)  # every transfer fails
    """

    pool_balance: int = 0
    accept: bool = True
    calls: list[tuple] = field(default_factory=list)  # Track calls for assertions

    def balance_of(self, owner: str) -> int:
        self.calls.append(("balance_of", owner))
        return self.pool_balance

    def transfer(self, to: str, value: int) -> bool:
        self.calls.append(("transfer", to, value))
        if self.accept:
            self.pool_balance -= value
        return self.accept

    def transfer_from(self, owner: str, to: str, value: int) -> bool:
        self.calls.append(("transfer_from", owner, to, value))
        if self.accept:
            self.pool_balance += value
        return self.accept


@dataclass
class FakeContext:
    """MessageContext with a plain native balance for the pool.

    ``balance`` is the pool's balance including the attached value.
    """

    caller: str
    value: int = 0
    self_address: str = POOL
    balance: int = 0
    sent: list[tuple[str, int]] = field(default_factory=list)

    def self_balance(self) -> int:
        return self.balance

    def transfer_native(self, to: str, amount: int) -> None:
        self.balance -= amount
        self.sent.append((to, amount))
