"""Constant-product pricing with a 0.3% fee.

Formula (exact input):  out = (in * 997 * R_out) / (R_in * 1000 + in * 997)
Formula (exact output): in  = (R_in * out * 1000) / ((R_out - out) * 997) + 1

All intermediate products are computed in Uint256 so that uint64 amounts
and reserves can never overflow, and every result is floored exactly as the
on-chain contract floors it. Both functions are pure; callers pass a reserve
snapshot taken at the start of the call.
"""

from __future__ import annotations

import structlog

from swap.constants import FEE_DENOMINATOR, FEE_NUMERATOR
from swap.errors import PreconditionViolation, Uint64Overflow, Underflow
from swap.math.uint256 import U, Uint256

logger = structlog.get_logger()


def get_input_price(input_amount: int, input_reserve: int, output_reserve: int) -> int:
    """Output amount bought by selling exactly ``input_amount``.

    The result is strictly below ``output_reserve`` for any input, so a single
    swap can never drain the pool.

    Args:
        input_amount: Amount of the input asset sold
        input_reserve: Pool reserve of the input asset
        output_reserve: Pool reserve of the output asset

    Returns:
        Output amount (floored)

    Raises:
        PreconditionViolation: If either reserve is zero
    """
    if input_reserve <= 0 or output_reserve <= 0:
        raise PreconditionViolation(
            f"Reserves must be positive: input_reserve={input_reserve}, "
            f"output_reserve={output_reserve}"
        )

    input_amount_with_fee = U(input_amount) * U(FEE_NUMERATOR)
    numerator = input_amount_with_fee * U(output_reserve)
    denominator = U(input_reserve) * U(FEE_DENOMINATOR) + input_amount_with_fee
    return _to_uint64(numerator // denominator)


def get_output_price(output_amount: int, input_reserve: int, output_reserve: int) -> int:
    """Input amount required to buy exactly ``output_amount``.

    Rounds up (the trailing +1), so the trader always pays at least the
    fair amount: ``get_output_price(get_input_price(x, a, b), a, b) <= x``.

    Args:
        output_amount: Amount of the output asset bought
        input_reserve: Pool reserve of the input asset
        output_reserve: Pool reserve of the output asset

    Returns:
        Required input amount

    Raises:
        PreconditionViolation: If either reserve is zero
        Underflow: If output_amount >= output_reserve
        Uint64Overflow: If the required input does not fit in uint64
    """
    if input_reserve <= 0 or output_reserve <= 0:
        raise PreconditionViolation(
            f"Reserves must be positive: input_reserve={input_reserve}, "
            f"output_reserve={output_reserve}"
        )
    if output_amount >= output_reserve:
        raise Underflow(
            f"Output {output_amount} would exhaust the output reserve {output_reserve}"
        )

    numerator = U(input_reserve) * U(output_amount) * U(FEE_DENOMINATOR)
    denominator = U(output_reserve - output_amount) * U(FEE_NUMERATOR)
    return _to_uint64(numerator // denominator + 1)


def _to_uint64(value: Uint256) -> int:
    if not value.fits_uint64():
        logger.debug("price_exceeds_uint64", value=str(value))
        raise Uint64Overflow(f"Price does not fit in uint64: {value}")
    return value.low64()
