"""Shared type definitions for pool models and entry arguments.

Addresses on the host are 32 bytes and are written as 0x-prefixed,
lowercase hex strings. Amounts are uint64.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field, TypeAdapter, ValidationError

from swap.constants import UINT64_MAX
from swap.errors import PreconditionViolation

ADDRESS_LEN = 32


def validate_uint64(value: Any) -> int:
    """Validate that a value is a uint64.

    Args:
        value: Value to validate (int or decimal string)

    Returns:
        The value as an int

    Raises:
        ValueError: If value is not a non-negative integer within uint64 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint64 cannot be a bool")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint64 must be a decimal integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"Uint64 must be int or string, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"Uint64 cannot be negative: {value}")
    if value > UINT64_MAX:
        raise ValueError(f"Uint64 overflow: {value} > 2^64-1")

    return value


# 32-byte host address (64 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{64}$")]

# 64-bit unsigned integer (validated)
Uint64 = Annotated[
    int,
    BeforeValidator(validate_uint64),
    Field(description="64-bit unsigned integer"),
]

_uint64_adapter: TypeAdapter[int] = TypeAdapter(Uint64)


def require_uint64(name: str, value: Any) -> int:
    """Validate an entry argument as uint64.

    Raises:
        PreconditionViolation: If the value is not a uint64
    """
    try:
        return _uint64_adapter.validate_python(value)
    except ValidationError as err:
        raise PreconditionViolation(f"Invalid {name}: {value!r} is not a uint64") from err


def require_address(name: str, value: Any) -> str:
    """Validate and normalize an address entry argument.

    Raises:
        PreconditionViolation: If the value is not a 32-byte host address
    """
    try:
        return normalize_address(value, validate=True)
    except (AttributeError, ValueError) as err:
        raise PreconditionViolation(f"Invalid {name} address: {value!r}") from err


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize a host address to lowercase with 0x prefix.

    Raises:
        ValueError: If validate=True and address is not a valid host address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid 32-byte host address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 2 + 2 * ADDRESS_LEN:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def address_from_int(value: int) -> str:
    """Address whose first 8 bytes hold ``value`` little-endian, rest zero.

    Storage scalar cells and map ids are addressed this way.
    """
    raw = value.to_bytes(8, "little") + bytes(ADDRESS_LEN - 8)
    return "0x" + raw.hex()


def address_to_bytes(address: str) -> bytes:
    """Raw 32 bytes of a host address.

    Raises:
        ValueError: If the address is malformed
    """
    addr = normalize_address(address, validate=True)
    return bytes.fromhex(addr[2:])
