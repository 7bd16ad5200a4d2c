"""Checked uint64 wrapper for ledger amounts.

Share balances, total supply and token amounts are uint64 on chain. Domain
logic must never let them wrap, so SafeU64 rejects instead:
- Subtraction below zero raises Underflow
- Addition or multiplication past 2^64-1 raises Uint64Overflow

Usage pattern:
    from swap.math.safe_u64 import SafeU64

    balance = SafeU64(shares.get(owner))
    shares.set(owner, (balance - amount).value)  # Raises if amount > balance
"""

from __future__ import annotations

from swap.constants import UINT64_MAX
from swap.errors import Uint64Overflow, Underflow


class SafeU64:
    """uint64 with arithmetic that raises instead of wrapping.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeU64) -> None:
        """Create a SafeU64 from an int or another SafeU64.

        Raises:
            TypeError: If value is not an int or SafeU64
            Uint64Overflow: If value is outside [0, 2^64-1]
        """
        if isinstance(value, SafeU64):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            if value < 0 or value > UINT64_MAX:
                raise Uint64Overflow(f"Value does not fit in uint64: {value}")
            self._value = value
        else:
            raise TypeError(f"SafeU64 requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"SafeU64({self._value})"

    def __add__(self, other: SafeU64 | int) -> SafeU64:
        """Add two values.

        Raises:
            Uint64Overflow: If the sum exceeds 2^64-1
        """
        other_val = _extract_value(other)
        result = self._value + other_val
        if result > UINT64_MAX:
            raise Uint64Overflow(f"Overflow: {self._value} + {other_val} exceeds uint64")
        return SafeU64(result)

    def __sub__(self, other: SafeU64 | int) -> SafeU64:
        """Subtract other from self.

        Raises:
            Underflow: If the result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeU64(result)

    def __mul__(self, other: SafeU64 | int) -> SafeU64:
        other_val = _extract_value(other)
        result = self._value * other_val
        if result > UINT64_MAX:
            raise Uint64Overflow(f"Overflow: {self._value} * {other_val} exceeds uint64")
        return SafeU64(result)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeU64):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __lt__(self, other: SafeU64 | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeU64 | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeU64 | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeU64 | int) -> bool:
        return self._value >= _extract_value(other)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def checked_add(self, other: SafeU64 | int) -> SafeU64 | None:
        """Add, returning None on overflow instead of raising."""
        result = self._value + _extract_value(other)
        if result > UINT64_MAX:
            return None
        return SafeU64(result)

    def checked_sub(self, other: SafeU64 | int) -> SafeU64 | None:
        """Subtract, returning None on underflow instead of raising."""
        result = self._value - _extract_value(other)
        if result < 0:
            return None
        return SafeU64(result)


def _extract_value(x: SafeU64 | int) -> int:
    if isinstance(x, SafeU64):
        return x._value
    return x
