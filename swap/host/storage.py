"""Persistent key-value storage capability and typed cell accessors.

Every cell is addressed by a 32-byte id:
- scalar cells: the address built from a fixed numeric id
- mapping cells: sha256(serialize(map_id) ++ serialize(key))

``serialize`` is the 32-byte ABI word of the value, and cell values are
ABI-encoded uint64 words. Nested mappings use the outer cell id as the map
id of the inner mapping, so ``allowance[owner][spender]`` lives at
``sha256(sha256(map_id ++ owner) ++ spender)``.

Accessors read and write through explicit ``get``/``set`` calls and return
owned ints; there is no write-back proxy.
"""

from __future__ import annotations

import hashlib
from typing import Protocol, runtime_checkable

from eth_abi import decode, encode  # type: ignore[attr-defined]

from swap.models.types import ADDRESS_LEN, address_from_int, address_to_bytes

CELL_LEN = 32


@runtime_checkable
class Storage(Protocol):
    """Storage capability of a single contract."""

    def get(self, cell: bytes) -> bytes:
        """Read a cell; unset cells read as empty bytes."""
        ...

    def set(self, cell: bytes, data: bytes) -> None:
        """Write a cell."""
        ...


class MemoryStorage:
    """Dict-backed Storage."""

    def __init__(self, cells: dict[bytes, bytes] | None = None) -> None:
        self._cells: dict[bytes, bytes] = dict(cells or {})

    def get(self, cell: bytes) -> bytes:
        return self._cells.get(cell, b"")

    def set(self, cell: bytes, data: bytes) -> None:
        if len(cell) != CELL_LEN:
            raise ValueError(f"Cell id must be {CELL_LEN} bytes, got {len(cell)}")
        self._cells[cell] = data

    def snapshot(self) -> dict[bytes, bytes]:
        return dict(self._cells)

    def restore(self, cells: dict[bytes, bytes]) -> None:
        self._cells = dict(cells)

    def __len__(self) -> int:
        return len(self._cells)


def scalar_cell(cell_id: int) -> bytes:
    """Cell id of a fixed scalar slot."""
    return address_to_bytes(address_from_int(cell_id))


def map_cell(map_id: bytes, key: bytes) -> bytes:
    """Cell id of ``key`` inside mapping ``map_id``."""
    if len(map_id) != ADDRESS_LEN or len(key) != ADDRESS_LEN:
        raise ValueError("Map id and key must both be 32 bytes")
    return hashlib.sha256(encode(["bytes32", "bytes32"], [map_id, key])).digest()


def encode_uint64(value: int) -> bytes:
    return encode(["uint64"], [value])


def decode_uint64(data: bytes) -> int:
    if not data:
        return 0
    (value,) = decode(["uint64"], data)
    return value


class StorageVar:
    """A uint64 scalar cell."""

    def __init__(self, storage: Storage, cell_id: int) -> None:
        self._storage = storage
        self._cell = scalar_cell(cell_id)

    def get(self) -> int:
        return decode_uint64(self._storage.get(self._cell))

    def set(self, value: int) -> None:
        self._storage.set(self._cell, encode_uint64(value))


class StorageMap:
    """A mapping from address to uint64 cells."""

    def __init__(self, storage: Storage, map_id: int | bytes) -> None:
        self._storage = storage
        self._map_id = scalar_cell(map_id) if isinstance(map_id, int) else map_id

    def cell(self, key: str) -> bytes:
        return map_cell(self._map_id, address_to_bytes(key))

    def get(self, key: str) -> int:
        return decode_uint64(self._storage.get(self.cell(key)))

    def set(self, key: str, value: int) -> None:
        self._storage.set(self.cell(key), encode_uint64(value))

    def nested(self, key: str) -> StorageMap:
        """The inner mapping stored under ``key``."""
        return StorageMap(self._storage, self.cell(key))
