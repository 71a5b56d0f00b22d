"""The pool aggregate and its versioned ledger encoding.

The ledger stores a single JSON record under a fixed key. Version 1 records
carry ``schemaVersion: 1`` and decimal-string amounts. Records without a
version are the original chaincode shape (``ethReserve``, ``swapFeeNum``,
JSON-number amounts, ``null`` for empty collections) and are migrated in
memory on read.
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError, model_validator

from exchange.errors import StoreFailure
from exchange.models.types import Amount
from exchange.safe_int import S

logger = structlog.get_logger()

SCHEMA_VERSION = 1

# Version 0 key -> version 1 key
_V0_RENAMES = {
    "ethReserve": "baseReserve",
    "ethFeeReserve": "baseFeeReserve",
    "swapFeeNum": "swapFeeNumerator",
    "swapFeeDenom": "swapFeeDenominator",
}


class Pool(BaseModel):
    """Two-asset constant-product pool.

    Invariants maintained by the state machine:
    - total_shares == sum(lp_shares.values())
    - every key of lp_shares has a positive balance and appears exactly
      once in liquidity_providers, in order of first deposit
    - total_shares == 0 implies both tradable reserves are zero
    """

    base_reserve: Amount = Field(default=0, alias="baseReserve")
    token_reserve: Amount = Field(default=0, alias="tokenReserve")
    base_fee_reserve: Amount = Field(default=0, alias="baseFeeReserve")
    token_fee_reserve: Amount = Field(default=0, alias="tokenFeeReserve")
    swap_fee_numerator: int = Field(default=3, ge=0, alias="swapFeeNumerator")
    swap_fee_denominator: int = Field(default=1000, gt=0, alias="swapFeeDenominator")
    liquidity_providers: list[str] = Field(default_factory=list, alias="liquidityProviders")
    total_shares: Amount = Field(default=0, alias="totalShares")
    lp_shares: dict[str, Amount] = Field(default_factory=dict, alias="lpShares")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _check_fee(self) -> Pool:
        if self.swap_fee_numerator > self.swap_fee_denominator:
            raise ValueError(
                f"swap fee {self.swap_fee_numerator}/{self.swap_fee_denominator} exceeds 100%"
            )
        return self

    @classmethod
    def genesis(cls, swap_fee_numerator: int = 3, swap_fee_denominator: int = 1000) -> Pool:
        """Zero-valued pool as written at ledger genesis."""
        return cls(
            swap_fee_numerator=swap_fee_numerator,
            swap_fee_denominator=swap_fee_denominator,
        )

    @property
    def is_empty(self) -> bool:
        """True when neither side of the pool holds a reserve."""
        return self.base_reserve == 0 and self.token_reserve == 0

    @property
    def outstanding_shares(self) -> int:
        """Sum of all provider balances."""
        return sum(self.lp_shares.values())

    def shares_of(self, provider: str) -> int:
        return self.lp_shares.get(provider, 0)

    def credit_shares(self, provider: str, amount: int) -> None:
        """Mint shares to a provider, registering them on first deposit."""
        if provider not in self.lp_shares:
            self.liquidity_providers.append(provider)
        self.lp_shares[provider] = (S(self.shares_of(provider)) + S(amount)).value
        self.total_shares = (S(self.total_shares) + S(amount)).value

    def debit_shares(self, provider: str, amount: int) -> None:
        """Burn shares from a provider, pruning them once their balance is zero.

        Raises:
            Underflow: If the provider or the pool holds fewer shares than amount
        """
        remaining = S(self.shares_of(provider)) - S(amount)
        self.total_shares = (S(self.total_shares) - S(amount)).value
        if remaining:
            self.lp_shares[provider] = remaining.value
        else:
            self._drop_provider(provider)

    def forfeit_provider(self, index: int) -> tuple[str, int]:
        """Remove the provider at index and cancel their shares.

        The provider's share of the reserves stays in the pool. If no shares
        remain afterwards, the orphaned reserves are swept into the fee
        reserves.

        Returns:
            Tuple of (provider, forfeited_shares)

        Raises:
            IndexError: If index is out of range
        """
        if not 0 <= index < len(self.liquidity_providers):
            raise IndexError(index)
        provider = self.liquidity_providers[index]
        forfeited = self.shares_of(provider)
        self.total_shares = (S(self.total_shares) - S(forfeited)).value
        self._drop_provider(provider)
        self.sweep_orphaned_reserves()
        return provider, forfeited

    def sweep_orphaned_reserves(self) -> None:
        """Move reserves nobody holds a claim on into the fee reserves."""
        if self.total_shares != 0 or self.is_empty:
            return
        logger.warning(
            "orphaned_reserves_swept",
            base_reserve=self.base_reserve,
            token_reserve=self.token_reserve,
        )
        self.base_fee_reserve = (S(self.base_fee_reserve) + S(self.base_reserve)).value
        self.token_fee_reserve = (S(self.token_fee_reserve) + S(self.token_reserve)).value
        self.base_reserve = 0
        self.token_reserve = 0

    def _drop_provider(self, provider: str) -> None:
        self.lp_shares.pop(provider, None)
        if provider in self.liquidity_providers:
            self.liquidity_providers.remove(provider)


def encode_pool(pool: Pool) -> bytes:
    """Serialize a pool as a version 1 ledger record."""
    record = {"schemaVersion": SCHEMA_VERSION, **pool.model_dump(by_alias=True, mode="json")}
    return json.dumps(record, sort_keys=True, separators=(",", ":")).encode()


def decode_pool(data: bytes) -> Pool:
    """Deserialize a ledger record, migrating legacy records.

    Raises:
        StoreFailure: If the record is malformed or has an unknown version
    """
    try:
        record = json.loads(data)
    except (UnicodeDecodeError, ValueError) as err:
        raise StoreFailure(f"pool record is not valid JSON: {err}") from err

    if not isinstance(record, dict):
        raise StoreFailure(f"pool record must be an object, got {type(record).__name__}")

    version = record.pop("schemaVersion", 0)
    try:
        if version == SCHEMA_VERSION:
            return Pool.model_validate(record)
        if version == 0:
            return _migrate_v0(record)
    except ValidationError as err:
        raise StoreFailure(
            f"pool record failed validation ({err.error_count()} errors)"
        ) from err

    raise StoreFailure(f"unsupported pool schema version: {version!r}")


def _migrate_v0(record: dict[str, Any]) -> Pool:
    """Convert an unversioned chaincode record to the current model."""
    migrated = {_V0_RENAMES.get(key, key): value for key, value in record.items()}
    migrated = {key: value for key, value in migrated.items() if value is not None}

    pool = Pool.model_validate(migrated)

    # Old records list a provider once per deposit and keep entries whose
    # shares were deleted; rebuild the first-deposit index from balances.
    shares = {p: amount for p, amount in pool.lp_shares.items() if amount > 0}
    providers: list[str] = []
    for provider in pool.liquidity_providers:
        if provider in shares and provider not in providers:
            providers.append(provider)
    providers.extend(sorted(p for p in shares if p not in providers))

    pool.lp_shares = shares
    pool.liquidity_providers = providers

    outstanding = pool.outstanding_shares
    if outstanding != pool.total_shares:
        logger.warning(
            "legacy_share_mismatch",
            total_shares=pool.total_shares,
            outstanding_shares=outstanding,
        )
        pool.total_shares = outstanding
        pool.sweep_orphaned_reserves()

    logger.info("pool_record_migrated", from_version=0, to_version=SCHEMA_VERSION)
    return pool
