"""Tests for shared types and result models."""

import pytest
from pydantic import BaseModel, ValidationError

from swap.constants import UINT64_MAX
from swap.errors import PreconditionViolation
from swap.models.results import ReserveSnapshot, WithdrawResult
from swap.models.types import (
    Address,
    Uint64,
    address_from_int,
    address_to_bytes,
    is_valid_address,
    normalize_address,
    require_address,
    require_uint64,
    validate_uint64,
)


class TestValidateUint64:
    """Tests for the uint64 validator."""

    def test_accepts_ints_and_decimal_strings(self):
        assert validate_uint64(0) == 0
        assert validate_uint64(UINT64_MAX) == UINT64_MAX
        assert validate_uint64("1000") == 1000

    def test_rejects_out_of_range(self):
        with pytest.raises(ValueError, match="negative"):
            validate_uint64(-1)
        with pytest.raises(ValueError, match="overflow"):
            validate_uint64(UINT64_MAX + 1)

    def test_rejects_bool_and_other_types(self):
        with pytest.raises(ValueError):
            validate_uint64(True)
        with pytest.raises(ValueError):
            validate_uint64(1.0)
        with pytest.raises(ValueError):
            validate_uint64("0x10")

    def test_require_uint64_raises_precondition_violation(self):
        assert require_uint64("amount", 5) == 5
        with pytest.raises(PreconditionViolation, match="Invalid amount"):
            require_uint64("amount", -5)


class TestAnnotatedTypes:
    """Tests for Address and Uint64 inside pydantic models."""

    class Transfer(BaseModel):
        to: Address
        value: Uint64

    def test_valid(self):
        transfer = self.Transfer(to="0x" + "ab" * 32, value="42")
        assert transfer.value == 42

    def test_short_address_rejected(self):
        with pytest.raises(ValidationError):
            self.Transfer(to="0x" + "ab" * 20, value=1)

    def test_oversized_value_rejected(self):
        with pytest.raises(ValidationError):
            self.Transfer(to="0x" + "ab" * 32, value=2**64)


class TestAddresses:
    """Tests for address helpers."""

    def test_normalize(self):
        assert normalize_address("0xABCD") == "0xabcd"
        assert normalize_address("abcd") == "0xabcd"

    def test_normalize_validates_on_request(self):
        with pytest.raises(ValueError):
            normalize_address("0xabcd", validate=True)
        assert normalize_address("0x" + "AB" * 32, validate=True) == "0x" + "ab" * 32

    def test_require_address_raises_precondition_violation(self):
        assert require_address("to", "0x" + "AB" * 32) == "0x" + "ab" * 32
        with pytest.raises(PreconditionViolation, match="Invalid to address"):
            require_address("to", "0x1234")
        with pytest.raises(PreconditionViolation):
            require_address("to", None)

    def test_is_valid_address(self):
        assert is_valid_address("0x" + "00" * 32)
        assert not is_valid_address("0x" + "00" * 20)
        assert not is_valid_address("0x" + "zz" * 32)
        assert not is_valid_address(None)  # type: ignore[arg-type]

    def test_address_from_int_is_little_endian(self):
        """Low byte first, then zero padding to 32 bytes."""
        assert address_from_int(1) == "0x01" + "00" * 31
        assert address_from_int(0x0203) == "0x0302" + "00" * 30
        assert address_to_bytes(address_from_int(3))[:8] == (3).to_bytes(8, "little")


class TestResults:
    def test_withdraw_result_validates_amounts(self):
        assert WithdrawResult(tcoin_amount=1, token_amount="2").token_amount == 2
        with pytest.raises(ValidationError):
            WithdrawResult(tcoin_amount=-1, token_amount=0)

    def test_reserve_snapshot_is_frozen(self):
        snapshot = ReserveSnapshot(tcoin=1, token=2)
        with pytest.raises(AttributeError):
            snapshot.tcoin = 5  # type: ignore[misc]
