"""Token contracts runnable on the in-memory host."""

from swap.contracts.basic_token import BasicToken
from swap.contracts.ledger import LedgerToken

__all__ = ["BasicToken", "LedgerToken"]
