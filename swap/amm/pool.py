"""Two-asset constant-product liquidity pool (native tcoin vs. one token).

The pool is Empty while its share supply is zero and Active otherwise.
The first deposit bootstraps the price; later deposits must match the
current reserve ratio. Liquidity shares are themselves a fungible token
(see LedgerToken), so the ledger invariant ``sum(shares) == total_supply``
holds across deposits, withdrawals and share transfers.

Every mutating entry operation follows the same order:

1. validate arguments and take the reentrancy lock
2. snapshot reserves and compute amounts
3. write shares / total supply and pay out native coins
4. make exactly one outbound token call, last

Any rejection raises a SwapError; the host discards all changes made
during the call.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from swap.amm.pricing import get_input_price, get_output_price
from swap.config import DEFAULT_POOL_CONFIG, PoolConfig
from swap.constants import LOCK_CELL, TOTAL_SUPPLY_CELL
from swap.contracts.ledger import LedgerToken
from swap.errors import (
    ExternalCallFailure,
    InsufficientBalance,
    PreconditionViolation,
    ReentrantCall,
    SlippageExceeded,
    Underflow,
)
from swap.host.chain import Chain, RemoteToken
from swap.host.context import MessageContext
from swap.host.storage import Storage, StorageVar
from swap.host.token import Token
from swap.math.safe_u64 import SafeU64
from swap.math.uint256 import U
from swap.models.results import ReserveSnapshot, WithdrawResult
from swap.models.types import require_address, require_uint64

logger = structlog.get_logger()


class LiquidityPool(LedgerToken):
    """Liquidity pool and its share token.

    Args:
        storage: The pool's persistent storage
        token: Token capability bound to the pool's address
        config: Pool parameters (bootstrap minimum, share metadata)
    """

    def __init__(
        self,
        storage: Storage,
        token: Token,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        super().__init__(storage)
        self._token = token
        self._config = config
        self._total_supply = StorageVar(storage, TOTAL_SUPPLY_CELL)
        self._lock = StorageVar(storage, LOCK_CELL)

    @classmethod
    def deploy(
        cls,
        chain: Chain,
        token_address: str,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> str:
        """Deploy a pool for ``token_address`` on an in-memory Chain."""
        return chain.deploy(
            lambda chain, address, storage: cls(
                storage, RemoteToken(chain, token_address, address), config
            ),
            label="pool",
        )

    # --- Share token metadata ---

    def name(self, ctx: MessageContext) -> str:
        return self._config.share_name

    def symbol(self, ctx: MessageContext) -> str:
        return self._config.share_symbol

    def decimals(self, ctx: MessageContext) -> int:
        return self._config.share_decimals

    def total_supply(self, ctx: MessageContext) -> int:
        return self._total_supply.get()

    def approve(self, ctx: MessageContext, spender: str, value: int) -> bool:
        """Increase ``spender``'s allowance over the caller's shares.

        Returns False if the new allowance would exceed uint64.
        """
        value = require_uint64("value", value)
        allowances = self._allowances.nested(ctx.caller)
        spender = require_address("spender", spender)
        increased = SafeU64(allowances.get(spender)).checked_add(value)
        if increased is None:
            return False
        allowances.set(spender, increased.value)
        return True

    # --- Liquidity ---

    def deposit(self, ctx: MessageContext, min_liquidity: int, max_tokens: int) -> int:
        """Add liquidity: attached tcoin plus up to ``max_tokens`` tokens.

        On an empty pool, mints shares equal to the pool's native balance
        and pulls exactly ``max_tokens``. On an active pool, pulls tokens in
        proportion to the reserves (rounded up) and mints shares in
        proportion to the total supply (rounded down).

        Returns:
            Number of shares minted

        Raises:
            PreconditionViolation: Zero value or max_tokens, or a bootstrap
                below the configured minimum
            SlippageExceeded: Token amount above max_tokens or minted shares
                below min_liquidity
            ExternalCallFailure: The token pull was rejected
        """
        min_liquidity = require_uint64("min_liquidity", min_liquidity)
        max_tokens = require_uint64("max_tokens", max_tokens)
        with self._non_reentrant():
            if max_tokens == 0 or ctx.value == 0:
                raise PreconditionViolation(
                    f"Deposit needs attached tcoin and max_tokens > 0: "
                    f"value={ctx.value}, max_tokens={max_tokens}"
                )
            total_liquidity = self._total_supply.get()
            if total_liquidity > 0:
                return self._add_liquidity(ctx, total_liquidity, min_liquidity, max_tokens)
            return self._bootstrap(ctx, max_tokens)

    def _bootstrap(self, ctx: MessageContext, token_amount: int) -> int:
        if ctx.value < self._config.min_bootstrap_tcoin:
            raise PreconditionViolation(
                f"Initial deposit {ctx.value} is below the minimum "
                f"{self._config.min_bootstrap_tcoin}"
            )
        initial_liquidity = ctx.self_balance()
        self._total_supply.set(initial_liquidity)
        self._balances.set(ctx.caller, initial_liquidity)

        logger.info(
            "liquidity_bootstrapped",
            provider=ctx.caller,
            tcoin=ctx.value,
            tokens=token_amount,
            minted=initial_liquidity,
        )
        self._pull_tokens(ctx, ctx.caller, token_amount)
        return initial_liquidity

    def _add_liquidity(
        self,
        ctx: MessageContext,
        total_liquidity: int,
        min_liquidity: int,
        max_tokens: int,
    ) -> int:
        reserves = self._reserves(ctx)
        if reserves.tcoin == 0:
            raise PreconditionViolation("Pool has shares outstanding but no tcoin reserve")

        token_amount = U(ctx.value) * U(reserves.token) // U(reserves.tcoin) + 1
        liquidity_minted = U(ctx.value) * U(total_liquidity) // U(reserves.tcoin)
        if token_amount > max_tokens:
            raise SlippageExceeded(
                f"Deposit requires {token_amount} tokens, above max_tokens={max_tokens}"
            )
        if liquidity_minted < min_liquidity:
            raise SlippageExceeded(
                f"Deposit mints {liquidity_minted} shares, below min_liquidity={min_liquidity}"
            )

        minted = SafeU64(int(liquidity_minted))
        new_total = SafeU64(total_liquidity) + minted
        self._balances.set(ctx.caller, (SafeU64(self._balances.get(ctx.caller)) + minted).value)
        self._total_supply.set(new_total.value)

        logger.info(
            "liquidity_added",
            provider=ctx.caller,
            tcoin=ctx.value,
            tokens=int(token_amount),
            minted=minted.value,
            total_supply=new_total.value,
        )
        self._pull_tokens(ctx, ctx.caller, int(token_amount))
        return minted.value

    def withdraw(
        self,
        ctx: MessageContext,
        amount: int,
        min_tcoin: int,
        min_tokens: int,
    ) -> WithdrawResult:
        """Burn ``amount`` shares for a proportional slice of both reserves.

        Returns:
            WithdrawResult with the tcoin and token amounts paid out

        Raises:
            PreconditionViolation: Empty pool or a zero minimum
            InsufficientBalance: Caller holds fewer than ``amount`` shares
            SlippageExceeded: A payout is below its minimum
            ExternalCallFailure: The token transfer was rejected
        """
        amount = require_uint64("amount", amount)
        min_tcoin = require_uint64("min_tcoin", min_tcoin)
        min_tokens = require_uint64("min_tokens", min_tokens)
        with self._non_reentrant():
            total_liquidity = self._total_supply.get()
            if total_liquidity == 0:
                raise PreconditionViolation("Pool has no liquidity")
            shares = self._balances.get(ctx.caller)
            if shares < amount:
                raise InsufficientBalance(
                    f"Caller holds {shares} shares, cannot withdraw {amount}"
                )
            if min_tcoin == 0 or min_tokens == 0:
                raise PreconditionViolation(
                    f"Withdraw minimums must be positive: min_tcoin={min_tcoin}, "
                    f"min_tokens={min_tokens}"
                )

            reserves = self._reserves(ctx)
            tcoin_amount = (U(amount) * U(reserves.tcoin) // U(total_liquidity)).low64()
            token_amount = (U(amount) * U(reserves.token) // U(total_liquidity)).low64()
            if tcoin_amount < min_tcoin:
                raise SlippageExceeded(
                    f"Withdraw pays {tcoin_amount} tcoin, below min_tcoin={min_tcoin}"
                )
            if token_amount < min_tokens:
                raise SlippageExceeded(
                    f"Withdraw pays {token_amount} tokens, below min_tokens={min_tokens}"
                )

            self._balances.set(ctx.caller, (SafeU64(shares) - amount).value)
            self._total_supply.set((SafeU64(total_liquidity) - amount).value)
            if tcoin_amount:
                ctx.transfer_native(ctx.caller, tcoin_amount)

            logger.info(
                "liquidity_removed",
                provider=ctx.caller,
                burned=amount,
                tcoin=tcoin_amount,
                tokens=token_amount,
                total_supply=total_liquidity - amount,
            )
            self._push_tokens(ctx.caller, token_amount)
            return WithdrawResult(tcoin_amount=tcoin_amount, token_amount=token_amount)

    # --- tcoin -> token ---

    def receive(self, ctx: MessageContext) -> int:
        """Plain tcoin payment: sell all of it for at least one token."""
        with self._non_reentrant():
            return self._tcoin_to_token_input(ctx, ctx.value, 1, ctx.caller)

    def tcoin_to_token_swap_input(self, ctx: MessageContext, min_tokens: int) -> int:
        """Sell the attached tcoin for tokens paid to the caller."""
        min_tokens = require_uint64("min_tokens", min_tokens)
        with self._non_reentrant():
            return self._tcoin_to_token_input(ctx, ctx.value, min_tokens, ctx.caller)

    def tcoin_to_token_transfer_input(
        self, ctx: MessageContext, min_tokens: int, recipient: str
    ) -> int:
        """Sell the attached tcoin for tokens paid to ``recipient``."""
        min_tokens = require_uint64("min_tokens", min_tokens)
        recipient = require_address("recipient", recipient)
        with self._non_reentrant():
            return self._tcoin_to_token_input(ctx, ctx.value, min_tokens, recipient)

    def tcoin_to_token_swap_output(self, ctx: MessageContext, tokens_bought: int) -> int:
        """Buy exactly ``tokens_bought`` for the caller; attached tcoin is the maximum."""
        tokens_bought = require_uint64("tokens_bought", tokens_bought)
        with self._non_reentrant():
            return self._tcoin_to_token_output(
                ctx, tokens_bought, ctx.value, ctx.caller, ctx.caller
            )

    def tcoin_to_token_transfer_output(
        self, ctx: MessageContext, tokens_bought: int, recipient: str
    ) -> int:
        """Buy exactly ``tokens_bought`` for ``recipient``; attached tcoin is the maximum."""
        tokens_bought = require_uint64("tokens_bought", tokens_bought)
        recipient = require_address("recipient", recipient)
        with self._non_reentrant():
            return self._tcoin_to_token_output(
                ctx, tokens_bought, ctx.value, ctx.caller, recipient
            )

    def _tcoin_to_token_input(
        self, ctx: MessageContext, tcoin_sold: int, min_tokens: int, recipient: str
    ) -> int:
        if tcoin_sold == 0 or min_tokens == 0:
            raise PreconditionViolation(
                f"Swap needs tcoin_sold > 0 and min_tokens > 0: "
                f"tcoin_sold={tcoin_sold}, min_tokens={min_tokens}"
            )
        reserves = self._reserves(ctx)
        tokens_bought = get_input_price(tcoin_sold, reserves.tcoin, reserves.token)
        if tokens_bought < min_tokens:
            raise SlippageExceeded(
                f"Swap buys {tokens_bought} tokens, below min_tokens={min_tokens}"
            )

        logger.info(
            "tcoin_to_token_swap",
            buyer=ctx.caller,
            recipient=recipient,
            tcoin_sold=tcoin_sold,
            tokens_bought=tokens_bought,
        )
        self._push_tokens(recipient, tokens_bought)
        return tokens_bought

    def _tcoin_to_token_output(
        self,
        ctx: MessageContext,
        tokens_bought: int,
        max_tcoin: int,
        buyer: str,
        recipient: str,
    ) -> int:
        if tokens_bought == 0 or max_tcoin == 0:
            raise PreconditionViolation(
                f"Swap needs tokens_bought > 0 and attached tcoin: "
                f"tokens_bought={tokens_bought}, max_tcoin={max_tcoin}"
            )
        reserves = self._reserves(ctx)
        tcoin_sold = get_output_price(tokens_bought, reserves.tcoin, reserves.token)
        if tcoin_sold > max_tcoin:
            raise SlippageExceeded(
                f"Swap costs {tcoin_sold} tcoin, above attached max_tcoin={max_tcoin}"
            )

        tcoin_refund = max_tcoin - tcoin_sold
        if tcoin_refund > 0:
            ctx.transfer_native(buyer, tcoin_refund)

        logger.info(
            "tcoin_to_token_swap",
            buyer=buyer,
            recipient=recipient,
            tcoin_sold=tcoin_sold,
            tokens_bought=tokens_bought,
            refund=tcoin_refund,
        )
        self._push_tokens(recipient, tokens_bought)
        return tcoin_sold

    # --- token -> tcoin ---

    def token_to_tcoin_swap_input(
        self, ctx: MessageContext, tokens_sold: int, min_tcoin: int
    ) -> int:
        """Sell exactly ``tokens_sold`` for tcoin paid to the caller."""
        tokens_sold = require_uint64("tokens_sold", tokens_sold)
        min_tcoin = require_uint64("min_tcoin", min_tcoin)
        with self._non_reentrant():
            return self._token_to_tcoin_input(ctx, tokens_sold, min_tcoin, ctx.caller, ctx.caller)

    def token_to_tcoin_transfer_input(
        self, ctx: MessageContext, tokens_sold: int, min_tcoin: int, recipient: str
    ) -> int:
        """Sell exactly ``tokens_sold`` for tcoin paid to ``recipient``."""
        tokens_sold = require_uint64("tokens_sold", tokens_sold)
        min_tcoin = require_uint64("min_tcoin", min_tcoin)
        recipient = require_address("recipient", recipient)
        with self._non_reentrant():
            return self._token_to_tcoin_input(ctx, tokens_sold, min_tcoin, ctx.caller, recipient)

    def token_to_tcoin_swap_output(
        self, ctx: MessageContext, tcoin_bought: int, max_tokens: int
    ) -> int:
        """Buy exactly ``tcoin_bought`` for the caller, selling at most ``max_tokens``."""
        tcoin_bought = require_uint64("tcoin_bought", tcoin_bought)
        max_tokens = require_uint64("max_tokens", max_tokens)
        with self._non_reentrant():
            return self._token_to_tcoin_output(
                ctx, tcoin_bought, max_tokens, ctx.caller, ctx.caller
            )

    def token_to_tcoin_transfer_output(
        self, ctx: MessageContext, tcoin_bought: int, max_tokens: int, recipient: str
    ) -> int:
        """Buy exactly ``tcoin_bought`` for ``recipient``, selling at most ``max_tokens``."""
        tcoin_bought = require_uint64("tcoin_bought", tcoin_bought)
        max_tokens = require_uint64("max_tokens", max_tokens)
        recipient = require_address("recipient", recipient)
        with self._non_reentrant():
            return self._token_to_tcoin_output(
                ctx, tcoin_bought, max_tokens, ctx.caller, recipient
            )

    def _token_to_tcoin_input(
        self,
        ctx: MessageContext,
        tokens_sold: int,
        min_tcoin: int,
        buyer: str,
        recipient: str,
    ) -> int:
        if tokens_sold == 0 or min_tcoin == 0:
            raise PreconditionViolation(
                f"Swap needs tokens_sold > 0 and min_tcoin > 0: "
                f"tokens_sold={tokens_sold}, min_tcoin={min_tcoin}"
            )
        reserves = self._reserves(ctx)
        tcoin_bought = get_input_price(tokens_sold, reserves.token, reserves.tcoin)
        if tcoin_bought < min_tcoin:
            raise SlippageExceeded(
                f"Swap buys {tcoin_bought} tcoin, below min_tcoin={min_tcoin}"
            )

        ctx.transfer_native(recipient, tcoin_bought)
        logger.info(
            "token_to_tcoin_swap",
            buyer=buyer,
            recipient=recipient,
            tokens_sold=tokens_sold,
            tcoin_bought=tcoin_bought,
        )
        self._pull_tokens(ctx, buyer, tokens_sold)
        return tcoin_bought

    def _token_to_tcoin_output(
        self,
        ctx: MessageContext,
        tcoin_bought: int,
        max_tokens: int,
        buyer: str,
        recipient: str,
    ) -> int:
        if tcoin_bought == 0 or max_tokens == 0:
            raise PreconditionViolation(
                f"Swap needs tcoin_bought > 0 and max_tokens > 0: "
                f"tcoin_bought={tcoin_bought}, max_tokens={max_tokens}"
            )
        reserves = self._reserves(ctx)
        tokens_sold = get_output_price(tcoin_bought, reserves.token, reserves.tcoin)
        if tokens_sold > max_tokens:
            raise SlippageExceeded(
                f"Swap costs {tokens_sold} tokens, above max_tokens={max_tokens}"
            )

        ctx.transfer_native(recipient, tcoin_bought)
        logger.info(
            "token_to_tcoin_swap",
            buyer=buyer,
            recipient=recipient,
            tokens_sold=tokens_sold,
            tcoin_bought=tcoin_bought,
        )
        self._pull_tokens(ctx, buyer, tokens_sold)
        return tokens_sold

    # --- Quotes ---

    def get_tcoin_to_token_input_price(self, ctx: MessageContext, tcoin_sold: int) -> int:
        """Tokens bought by selling ``tcoin_sold`` at current reserves."""
        tcoin_sold = _require_positive("tcoin_sold", tcoin_sold)
        reserves = self._reserves(ctx)
        return get_input_price(tcoin_sold, reserves.tcoin, reserves.token)

    def get_tcoin_to_token_output_price(self, ctx: MessageContext, tokens_bought: int) -> int:
        """tcoin needed to buy ``tokens_bought`` at current reserves."""
        tokens_bought = _require_positive("tokens_bought", tokens_bought)
        reserves = self._reserves(ctx)
        return get_output_price(tokens_bought, reserves.tcoin, reserves.token)

    def get_token_to_tcoin_input_price(self, ctx: MessageContext, tokens_sold: int) -> int:
        """tcoin bought by selling ``tokens_sold`` at current reserves."""
        tokens_sold = _require_positive("tokens_sold", tokens_sold)
        reserves = self._reserves(ctx)
        return get_input_price(tokens_sold, reserves.token, reserves.tcoin)

    def get_token_to_tcoin_output_price(self, ctx: MessageContext, tcoin_bought: int) -> int:
        """Tokens needed to buy ``tcoin_bought`` at current reserves."""
        tcoin_bought = _require_positive("tcoin_bought", tcoin_bought)
        reserves = self._reserves(ctx)
        return get_output_price(tcoin_bought, reserves.token, reserves.tcoin)

    # --- Internals ---

    def _reserves(self, ctx: MessageContext) -> ReserveSnapshot:
        """Reserves as they stood before this call's attached value arrived."""
        try:
            tcoin = (SafeU64(ctx.self_balance()) - ctx.value).value
        except Underflow as err:
            raise PreconditionViolation(
                f"Attached value {ctx.value} exceeds the pool balance"
            ) from err
        token = self._token.balance_of(ctx.self_address)
        return ReserveSnapshot(tcoin=tcoin, token=token)

    def _pull_tokens(self, ctx: MessageContext, owner: str, amount: int) -> None:
        if not self._token.transfer_from(owner, ctx.self_address, amount):
            raise ExternalCallFailure(
                f"Token transfer of {amount} from {owner} to the pool failed"
            )

    def _push_tokens(self, to: str, amount: int) -> None:
        if not self._token.transfer(to, amount):
            raise ExternalCallFailure(f"Token transfer of {amount} to {to} failed")

    @contextmanager
    def _non_reentrant(self) -> Iterator[None]:
        if self._lock.get():
            raise ReentrantCall("Pool entry operation re-entered during an outbound call")
        self._lock.set(1)
        try:
            yield
        finally:
            self._lock.set(0)


def _require_positive(name: str, value: int) -> int:
    value = require_uint64(name, value)
    if value == 0:
        raise PreconditionViolation(f"{name} must be positive")
    return value
