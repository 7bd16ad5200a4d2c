"""Host capabilities the pool depends on, and an in-memory host.

- Storage / MemoryStorage: persistent cells with typed accessors
- MessageContext / CallContext: caller, attached value, own balance
- Token: remote token contract
- Chain / RemoteToken: runs contracts atomically without a live node
"""

from swap.host.chain import Chain, RemoteToken
from swap.host.context import CallContext, MessageContext
from swap.host.storage import MemoryStorage, Storage, StorageMap, StorageVar
from swap.host.token import Token

__all__ = [
    "CallContext",
    "Chain",
    "MemoryStorage",
    "MessageContext",
    "RemoteToken",
    "Storage",
    "StorageMap",
    "StorageVar",
    "Token",
]
