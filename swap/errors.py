"""Rejection reasons raised by pool entry operations.

Any of these aborts the whole entry operation. The host discards every
storage write made earlier in the same call, so a caller observing one of
these errors can assume the pool is exactly as it was before the call.
"""


class SwapError(Exception):
    """Base class for pool rejections."""

    pass


class PreconditionViolation(SwapError):
    """An argument or pool state does not satisfy an operation's precondition."""

    pass


class ReentrantCall(PreconditionViolation):
    """A mutating entry operation was invoked while another one is running."""

    pass


class Uint64Overflow(PreconditionViolation):
    """A uint64 amount would exceed 2^64-1."""

    pass


class SlippageExceeded(SwapError):
    """A caller-supplied min/max bound was not met."""

    pass


class InsufficientBalance(SwapError):
    """An account's recorded share or allowance is too small."""

    pass


class ExternalCallFailure(SwapError):
    """The token capability rejected a transfer."""

    pass


class Underflow(SwapError):
    """A domain subtraction would produce a negative amount."""

    pass
