"""Result types returned by pool operations."""

from dataclasses import dataclass

from pydantic import BaseModel

from swap.models.types import Uint64


@dataclass(frozen=True)
class ReserveSnapshot:
    """Pool holdings before the current call's attached value was credited.

    Attributes:
        tcoin: Native reserve (own balance minus attached value)
        token: Token reserve (token.balance_of(pool))
    """

    tcoin: int
    token: int


class WithdrawResult(BaseModel):
    """Amounts paid out by a withdrawal."""

    tcoin_amount: Uint64
    token_amount: Uint64
