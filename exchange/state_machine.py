"""Pool state machine.

Every operation is one read-modify-write of the singleton pool record inside
the caller's transaction: load the latest committed snapshot, validate,
compute the new state on that private copy, then write it back once. Any
error raised before the final write leaves the ledger untouched.
"""

from __future__ import annotations

import structlog

from exchange.amm.constant_product import ConstantProduct, constant_product
from exchange.config import DEFAULT_CONFIG, ExchangeConfig
from exchange.errors import (
    AlreadyInitialized,
    EmptyPool,
    InsufficientShares,
    InvalidIndex,
    NoLiquidity,
    SlippageExceeded,
    Uninitialized,
)
from exchange.ledger.base import Transaction
from exchange.models.pool import Pool, decode_pool, encode_pool
from exchange.models.results import (
    Deposit,
    FeeReserves,
    Forfeiture,
    Providers,
    Redemption,
    Reserves,
    ShareBalance,
    SwapFee,
    SwapReceipt,
    TxResult,
)
from exchange.models.types import parse_amount, parse_positive_amount
from exchange.safe_int import S

logger = structlog.get_logger()


class PoolStateMachine:
    """Operations on the two-asset pool.

    The acting identity is taken from the transaction passed to each call,
    never from ambient state, and no pool state is cached between calls.

    Args:
        config: Pool key and genesis fee fraction
        amm: Pricing math (default: the module-level ConstantProduct)
    """

    def __init__(
        self,
        config: ExchangeConfig = DEFAULT_CONFIG,
        amm: ConstantProduct = constant_product,
    ) -> None:
        self.config = config
        self.amm = amm

    # --- Persistence ---

    def load(self, tx: Transaction) -> Pool:
        """Read the pool snapshot, or the genesis pool if none was written.

        Raises:
            StoreFailure: If the record cannot be read or decoded
        """
        data = tx.read(self.config.pool_key)
        if data is None:
            return self._genesis()
        return decode_pool(data)

    def _save(self, tx: Transaction, pool: Pool) -> None:
        tx.write(self.config.pool_key, encode_pool(pool))

    def _genesis(self) -> Pool:
        return Pool.genesis(self.config.swap_fee_numerator, self.config.swap_fee_denominator)

    # --- Lifecycle ---

    def initialize(self, tx: Transaction) -> TxResult:
        """Write the genesis record.

        Raises:
            AlreadyInitialized: If a pool record already exists
        """
        if tx.read(self.config.pool_key) is not None:
            raise AlreadyInitialized("pool record already exists")

        self._save(tx, self._genesis())
        logger.info(
            "pool_initialized",
            swap_fee_numerator=self.config.swap_fee_numerator,
            swap_fee_denominator=self.config.swap_fee_denominator,
            tx_id=tx.transaction_id(),
        )
        return TxResult(tx_id=tx.transaction_id())

    def create_pool(self, tx: Transaction, token_amount: str | int) -> TxResult:
        """Seed the token side of an empty pool.

        The caller becomes the first provider with one share per token.
        The base side arrives with the first addLiquidity.

        Raises:
            InvalidAmount: If token_amount is unparsable or not positive
            AlreadyInitialized: If the pool holds reserves or shares
        """
        amount = parse_positive_amount(token_amount, "token amount")
        pool = self.load(tx)
        if not pool.is_empty or pool.total_shares:
            raise AlreadyInitialized("pool already initialized")

        caller = tx.caller_identity()
        pool.token_reserve = amount
        pool.credit_shares(caller, amount)

        self._save(tx, pool)
        logger.info("pool_created", caller=caller, token_amount=amount, tx_id=tx.transaction_id())
        return TxResult(tx_id=tx.transaction_id())

    # --- Liquidity ---

    def add_liquidity(self, tx: Transaction, base_amount: str | int) -> Deposit:
        """Deposit base plus the token amount that keeps the current price.

        Shares are denominated in base units: the caller is credited
        base_amount shares.

        Raises:
            InvalidAmount: If base_amount is unparsable or not positive
            Uninitialized: If the pool holds reserves nobody has a claim on
        """
        amount = parse_positive_amount(base_amount, "base amount")
        pool = self.load(tx)
        if pool.total_shares == 0 and not pool.is_empty:
            raise Uninitialized("pool holds reserves but no shares")

        token_amount = self.amm.get_paired_amount(amount, pool.base_reserve, pool.token_reserve)

        caller = tx.caller_identity()
        pool.base_reserve = (S(pool.base_reserve) + S(amount)).value
        pool.token_reserve = (S(pool.token_reserve) + S(token_amount)).value
        pool.credit_shares(caller, amount)

        self._save(tx, pool)
        logger.info(
            "liquidity_added",
            caller=caller,
            base_amount=amount,
            token_amount=token_amount,
            tx_id=tx.transaction_id(),
        )
        return Deposit(
            tx_id=tx.transaction_id(),
            base_amount=amount,
            token_amount=token_amount,
            shares=amount,
        )

    def remove_liquidity(
        self,
        tx: Transaction,
        share_amount: str | int,
        min_base_out: str | int | None = None,
        min_token_out: str | int | None = None,
    ) -> Redemption:
        """Burn shares for a proportional cut of both reserves.

        Outputs round down, so repeated partial redemptions can leave dust
        in the pool for the remaining providers.

        Raises:
            InvalidAmount: If an amount is unparsable or share_amount is not positive
            NoLiquidity: If no shares are outstanding
            InsufficientShares: If the caller holds fewer than share_amount
            SlippageExceeded: If an output is below its minimum
        """
        shares = parse_positive_amount(share_amount, "share amount")
        pool = self.load(tx)
        return self._redeem(tx, pool, shares, min_base_out, min_token_out)

    def remove_all_liquidity(
        self,
        tx: Transaction,
        min_base_out: str | int | None = None,
        min_token_out: str | int | None = None,
    ) -> Redemption:
        """Redeem the caller's entire share balance.

        Raises:
            NoLiquidity: If the caller holds no shares
        """
        pool = self.load(tx)
        shares = pool.shares_of(tx.caller_identity())
        if shares == 0:
            raise NoLiquidity("no liquidity to remove")
        return self._redeem(tx, pool, shares, min_base_out, min_token_out)

    def _redeem(
        self,
        tx: Transaction,
        pool: Pool,
        shares: int,
        min_base_out: str | int | None,
        min_token_out: str | int | None,
    ) -> Redemption:
        min_base = _parse_minimum(min_base_out, "minimum base out")
        min_token = _parse_minimum(min_token_out, "minimum token out")
        if pool.total_shares == 0:
            raise NoLiquidity("pool has no outstanding shares")

        caller = tx.caller_identity()
        held = pool.shares_of(caller)
        if held < shares:
            raise InsufficientShares(f"insufficient shares: requested {shares}, held {held}")

        quote = self.amm.get_redemption(
            shares, pool.base_reserve, pool.token_reserve, pool.total_shares
        )
        if quote.base_out < min_base:
            raise SlippageExceeded(f"base out {quote.base_out} below minimum {min_base}")
        if quote.token_out < min_token:
            raise SlippageExceeded(f"token out {quote.token_out} below minimum {min_token}")

        pool.base_reserve = (S(pool.base_reserve) - S(quote.base_out)).value
        pool.token_reserve = (S(pool.token_reserve) - S(quote.token_out)).value
        pool.debit_shares(caller, shares)

        self._save(tx, pool)
        logger.info(
            "liquidity_removed",
            caller=caller,
            shares=shares,
            base_out=quote.base_out,
            token_out=quote.token_out,
            tx_id=tx.transaction_id(),
        )
        return Redemption(
            tx_id=tx.transaction_id(),
            shares=shares,
            base_out=quote.base_out,
            token_out=quote.token_out,
        )

    # --- Swaps ---

    def swap_base_for_tokens(
        self,
        tx: Transaction,
        base_amount_in: str | int,
        min_amount_out: str | int | None = None,
    ) -> SwapReceipt:
        """Sell base for tokens. The fee accrues to the base fee reserve."""
        return self._swap(tx, base_amount_in, min_amount_out, base_in=True)

    def swap_tokens_for_base(
        self,
        tx: Transaction,
        token_amount_in: str | int,
        min_amount_out: str | int | None = None,
    ) -> SwapReceipt:
        """Sell tokens for base. The fee accrues to the token fee reserve."""
        return self._swap(tx, token_amount_in, min_amount_out, base_in=False)

    def _swap(
        self,
        tx: Transaction,
        raw_amount_in: str | int,
        min_amount_out: str | int | None,
        base_in: bool,
    ) -> SwapReceipt:
        """Exact-input swap in either direction.

        Raises:
            InvalidAmount: If an amount is unparsable or amount_in is not positive
            EmptyPool: If either reserve is zero
            SlippageExceeded: If the output is below min_amount_out
        """
        amount_in = parse_positive_amount(raw_amount_in, "amount in")
        min_out = _parse_minimum(min_amount_out, "minimum amount out")
        pool = self.load(tx)

        if base_in:
            reserve_in, reserve_out = pool.base_reserve, pool.token_reserve
        else:
            reserve_in, reserve_out = pool.token_reserve, pool.base_reserve
        # A one-sided pool would hand the whole output reserve to any input
        if reserve_in == 0 or reserve_out == 0:
            raise EmptyPool("pool has no liquidity on both sides")

        quote = self.amm.get_amount_out(
            amount_in,
            reserve_in,
            reserve_out,
            pool.swap_fee_numerator,
            pool.swap_fee_denominator,
        )
        if quote.amount_out < min_out:
            raise SlippageExceeded(f"amount out {quote.amount_out} below minimum {min_out}")

        new_reserve_in = (S(reserve_in) + S(quote.amount_in_after_fee)).value
        new_reserve_out = (S(reserve_out) - S(quote.amount_out)).value
        if base_in:
            pool.base_reserve, pool.token_reserve = new_reserve_in, new_reserve_out
            pool.base_fee_reserve = (S(pool.base_fee_reserve) + S(quote.fee)).value
        else:
            pool.token_reserve, pool.base_reserve = new_reserve_in, new_reserve_out
            pool.token_fee_reserve = (S(pool.token_fee_reserve) + S(quote.fee)).value

        self._save(tx, pool)
        logger.info(
            "swap_executed",
            caller=tx.caller_identity(),
            direction="base_for_tokens" if base_in else "tokens_for_base",
            amount_in=amount_in,
            fee=quote.fee,
            amount_out=quote.amount_out,
            tx_id=tx.transaction_id(),
        )
        return SwapReceipt(
            tx_id=tx.transaction_id(),
            amount_in=amount_in,
            fee=quote.fee,
            amount_out=quote.amount_out,
        )

    # --- Queries ---

    def get_reserves(self, tx: Transaction) -> Reserves:
        pool = self.load(tx)
        return Reserves(base_reserve=pool.base_reserve, token_reserve=pool.token_reserve)

    def get_swap_fee(self, tx: Transaction) -> SwapFee:
        pool = self.load(tx)
        return SwapFee(numerator=pool.swap_fee_numerator, denominator=pool.swap_fee_denominator)

    def get_fee_reserves(self, tx: Transaction) -> FeeReserves:
        pool = self.load(tx)
        return FeeReserves(
            base_fee_reserve=pool.base_fee_reserve,
            token_fee_reserve=pool.token_fee_reserve,
        )

    def get_liquidity(self, tx: Transaction, provider: str | None = None) -> ShareBalance:
        """Share balance of provider, defaulting to the caller."""
        if provider is None:
            provider = tx.caller_identity()
        pool = self.load(tx)
        return ShareBalance(provider=provider, shares=pool.shares_of(provider))

    def get_providers(self, tx: Transaction) -> Providers:
        pool = self.load(tx)
        return Providers(providers=list(pool.liquidity_providers))

    # --- Administration ---

    def remove_provider(self, tx: Transaction, index: str | int) -> Forfeiture:
        """Forfeit the shares of the provider at index.

        The provider's claim on the reserves is cancelled rather than paid
        out: total shares drop by the forfeited amount and the reserves stay
        with the remaining providers.

        Raises:
            InvalidIndex: If index is not an integer within the provider list
        """
        position = _parse_index(index)
        pool = self.load(tx)
        try:
            provider, forfeited = pool.forfeit_provider(position)
        except IndexError as err:
            raise InvalidIndex(
                f"invalid index {position}: {len(pool.liquidity_providers)} providers"
            ) from err

        self._save(tx, pool)
        logger.warning(
            "provider_removed",
            caller=tx.caller_identity(),
            provider=provider,
            forfeited_shares=forfeited,
            tx_id=tx.transaction_id(),
        )
        return Forfeiture(tx_id=tx.transaction_id(), provider=provider, shares=forfeited)


def _parse_minimum(raw: str | int | None, name: str) -> int:
    if raw is None:
        return 0
    return parse_amount(raw, name)


def _parse_index(raw: str | int) -> int:
    if isinstance(raw, bool):
        raise InvalidIndex(f"invalid index: {raw!r}")
    if isinstance(raw, int):
        if raw < 0:
            raise InvalidIndex(f"invalid index: {raw}")
        return raw
    if isinstance(raw, str) and raw.isascii() and raw.isdigit():
        try:
            return int(raw)
        except ValueError as err:
            # Longer than the interpreter's int conversion limit
            raise InvalidIndex(f"invalid index: {raw[:20]}... ({len(raw)} digits)") from err
    raise InvalidIndex(f"invalid index: {raw!r}")
