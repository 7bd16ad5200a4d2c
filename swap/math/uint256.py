"""Fixed-width 256-bit unsigned integer.

Uint256 stores its magnitude as four 64-bit limbs (least significant first)
and performs every operation limb by limb, so results are bit-identical to
the on-chain arithmetic regardless of Python's arbitrary-precision ints:

- ``+``, ``-`` and unary ``-`` wrap modulo 2^256 (two's complement)
- ``*`` keeps the low 256 bits of the exact product
- ``//`` is floor division using an estimate-and-correct loop whose
  iteration count is bounded by the bit-length gap of the operands

Python ints are only used to move values in and out of the type.

Usage:
    from swap.math.uint256 import U

    q = (U(a) * U(997) * U(b)) // (U(c) * U(1000))
    return q.low64()
"""

from __future__ import annotations

__all__ = [
    "Uint256",
    "U",
    "Uint256Error",
    "DivisionByZero",
    "OutOfRange",
    "UINT256_MAX",
]

UINT256_MAX = 2**256 - 1

LIMBS = 4
MASK32 = 2**32 - 1
MASK64 = 2**64 - 1


class Uint256Error(ArithmeticError):
    """Base class for Uint256 errors."""

    pass


class DivisionByZero(Uint256Error):
    """Division or modulo by zero."""

    pass


class OutOfRange(Uint256Error):
    """Value cannot be represented in 256 unsigned bits."""

    pass


def _msb(x: int) -> int:
    """Index of the most significant set bit of a non-zero 64-bit word."""
    return x.bit_length() - 1


class Uint256:
    """256-bit unsigned integer over four 64-bit limbs.

    Instances are immutable. Binary operators accept another Uint256 or a
    non-negative int that fits in 256 bits.

    Attributes:
        limbs: The four 64-bit limbs, least significant first (read-only)
    """

    __slots__ = ("_limbs",)
    _limbs: tuple[int, int, int, int]

    def __init__(self, value: int | Uint256 = 0) -> None:
        """Create a Uint256 from an int or another Uint256.

        Raises:
            TypeError: If value is not an int or Uint256
            OutOfRange: If value is negative or exceeds 2^256-1
        """
        if isinstance(value, Uint256):
            self._limbs = value._limbs
        elif isinstance(value, int) and not isinstance(value, bool):
            if value < 0 or value > UINT256_MAX:
                raise OutOfRange(f"Value does not fit in uint256: {value}")
            self._limbs = (
                value & MASK64,
                (value >> 64) & MASK64,
                (value >> 128) & MASK64,
                (value >> 192) & MASK64,
            )
        else:
            raise TypeError(f"Uint256 requires int, got {type(value).__name__}")

    @classmethod
    def from_limbs(cls, limbs: tuple[int, ...] | list[int]) -> Uint256:
        """Build a value from four 64-bit limbs, least significant first."""
        if len(limbs) != LIMBS or any(not 0 <= limb <= MASK64 for limb in limbs):
            raise OutOfRange(f"Expected four 64-bit limbs, got {limbs!r}")
        result = cls.__new__(cls)
        result._limbs = tuple(limbs)  # type: ignore[assignment]
        return result

    @classmethod
    def shifted(cls, word: int, shift: int) -> Uint256:
        """Place a 64-bit word at bit position ``shift``.

        Bits pushed past bit 255 are dropped.
        """
        limbs = [0, 0, 0, 0]
        index, offset = divmod(shift, 64)
        if offset == 0:
            limbs[index] = word
        else:
            limbs[index] = (word << offset) & MASK64
            if index < LIMBS - 1:
                limbs[index + 1] = word >> (64 - offset)
        return cls.from_limbs(limbs)

    @property
    def limbs(self) -> tuple[int, int, int, int]:
        return self._limbs

    def __repr__(self) -> str:
        return f"Uint256({int(self)})"

    def __str__(self) -> str:
        return str(int(self))

    def __hash__(self) -> int:
        return hash(self._limbs)

    # --- Arithmetic ---

    def add(self, other: Uint256 | int) -> Uint256:
        """Sum modulo 2^256."""
        b = _coerce(other)._limbs
        out = []
        carry = 0
        for i in range(LIMBS):
            tmp = self._limbs[i] + b[i] + carry
            out.append(tmp & MASK64)
            carry = tmp >> 64
        return Uint256.from_limbs(out)

    def neg(self) -> Uint256:
        """Two's complement negation modulo 2^256."""
        inverted = Uint256.from_limbs([~limb & MASK64 for limb in self._limbs])
        return inverted.add(ONE)

    def sub(self, other: Uint256 | int) -> Uint256:
        """Difference modulo 2^256."""
        return self.add(_coerce(other).neg())

    def mul(self, other: Uint256 | int) -> Uint256:
        """Product truncated to the low 256 bits.

        Partial products are formed on 32-bit half limbs so that every
        column sum fits in 64 bits before carry propagation.
        """
        a = self._halves()
        b = _coerce(other)._halves()
        width = len(a)
        sums = [0] * width
        for i in range(width):
            for j in range(width - i):
                tmp = a[i] * b[j]
                sums[i + j] += tmp & MASK32
                if i + j < width - 1:
                    sums[i + j + 1] += tmp >> 32
        halves = []
        carry = 0
        for i in range(width):
            tmp = sums[i] + carry
            halves.append(tmp & MASK32)
            carry = tmp >> 32
        return Uint256.from_limbs([halves[2 * i] | (halves[2 * i + 1] << 32) for i in range(LIMBS)])

    def div_floor(self, other: Uint256 | int) -> Uint256:
        """Floor division.

        Raises:
            DivisionByZero: If other is zero
        """
        return self.divmod_floor(other)[0]

    def divmod_floor(self, other: Uint256 | int) -> tuple[Uint256, Uint256]:
        """Quotient and remainder of floor division.

        Each round estimates a quotient digit from the top 64 significant
        bits of remainder and divisor. Dividing by ``top_divisor + 1`` keeps
        the trial product below the remainder, so the quotient only ever
        grows and the remainder only ever shrinks.

        Raises:
            DivisionByZero: If other is zero
        """
        divisor = _coerce(other)
        if divisor.is_zero():
            raise DivisionByZero(f"Division by zero: {self} // 0")

        remainder = self
        quotient = ZERO
        div_bits, div_shift = divisor._msbits()
        while remainder >= divisor:
            rem_bits, rem_shift = remainder._msbits()
            shift = rem_shift - div_shift
            # Narrow the divisor estimate when the gap allows it, which
            # yields larger digits and fewer rounds.
            ushift = min(shift >> 1, 32)
            div_top = div_bits >> ushift
            if ushift and div_top:
                digit = rem_bits // (div_top + 1)
                step = Uint256.shifted(digit, shift - ushift) if digit else ONE
            else:
                digit = rem_bits // (div_bits + 1)
                step = Uint256.shifted(digit, shift) if digit else ONE
            quotient = quotient.add(step)
            remainder = remainder.sub(step.mul(divisor))
        return quotient, remainder

    def __add__(self, other: Uint256 | int) -> Uint256:
        return self.add(other)

    def __radd__(self, other: int) -> Uint256:
        return _coerce(other).add(self)

    def __sub__(self, other: Uint256 | int) -> Uint256:
        return self.sub(other)

    def __rsub__(self, other: int) -> Uint256:
        return _coerce(other).sub(self)

    def __neg__(self) -> Uint256:
        return self.neg()

    def __mul__(self, other: Uint256 | int) -> Uint256:
        return self.mul(other)

    def __rmul__(self, other: int) -> Uint256:
        return _coerce(other).mul(self)

    def __floordiv__(self, other: Uint256 | int) -> Uint256:
        return self.div_floor(other)

    def __rfloordiv__(self, other: int) -> Uint256:
        return _coerce(other).div_floor(self)

    def __mod__(self, other: Uint256 | int) -> Uint256:
        return self.divmod_floor(other)[1]

    def __divmod__(self, other: Uint256 | int) -> tuple[Uint256, Uint256]:
        return self.divmod_floor(other)

    # --- Comparison ---

    def _compare(self, other: Uint256 | int) -> int:
        b = _coerce(other)._limbs
        for i in range(LIMBS - 1, -1, -1):
            if self._limbs[i] != b[i]:
                return -1 if self._limbs[i] < b[i] else 1
        return 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Uint256):
            return self._limbs == other._limbs
        if isinstance(other, int) and not isinstance(other, bool):
            return 0 <= other <= UINT256_MAX and self._limbs == Uint256(other)._limbs
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    def __lt__(self, other: Uint256 | int) -> bool:
        return self._compare(other) < 0

    def __le__(self, other: Uint256 | int) -> bool:
        return self._compare(other) <= 0

    def __gt__(self, other: Uint256 | int) -> bool:
        return self._compare(other) > 0

    def __ge__(self, other: Uint256 | int) -> bool:
        return self._compare(other) >= 0

    # --- Conversion ---

    def __int__(self) -> int:
        a0, a1, a2, a3 = self._limbs
        return a0 | (a1 << 64) | (a2 << 128) | (a3 << 192)

    def __index__(self) -> int:
        return int(self)

    def __bool__(self) -> bool:
        return not self.is_zero()

    def is_zero(self) -> bool:
        return not any(self._limbs)

    def low64(self) -> int:
        """The least significant 64 bits (C-style narrowing to uint64)."""
        return self._limbs[0]

    def fits_uint64(self) -> bool:
        return not any(self._limbs[1:])

    def _halves(self) -> list[int]:
        halves = []
        for limb in self._limbs:
            halves.append(limb & MASK32)
            halves.append(limb >> 32)
        return halves

    def _msbits(self) -> tuple[int, int]:
        """Top 64 significant bits and the bit position of their lowest bit."""
        for i in range(LIMBS - 1, 0, -1):
            word = self._limbs[i]
            if word:
                top = _msb(word)
                if top == 63:
                    return word, i << 6
                bits = ((word << (63 - top)) & MASK64) | (self._limbs[i - 1] >> (top + 1))
                return bits, ((i - 1) << 6) | (top + 1)
        return self._limbs[0], 0

    @classmethod
    def zero(cls) -> Uint256:
        return ZERO

    @classmethod
    def max(cls) -> Uint256:
        return MAX


def _coerce(x: Uint256 | int) -> Uint256:
    if isinstance(x, Uint256):
        return x
    return Uint256(x)


ZERO = Uint256.from_limbs((0, 0, 0, 0))
ONE = Uint256.from_limbs((1, 0, 0, 0))
MAX = Uint256.from_limbs((MASK64, MASK64, MASK64, MASK64))

# Convenience alias for concise code
U = Uint256
