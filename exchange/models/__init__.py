"""Pydantic models for the pool record and operation payloads."""

from exchange.models.pool import SCHEMA_VERSION, Pool, decode_pool, encode_pool
from exchange.models.results import (
    Deposit,
    Failure,
    FeeReserves,
    Forfeiture,
    OperationResult,
    Providers,
    Redemption,
    Reserves,
    ShareBalance,
    SwapFee,
    SwapReceipt,
    TxResult,
)
from exchange.models.types import Amount, parse_amount, parse_positive_amount

__all__ = [
    # Types
    "Amount",
    "parse_amount",
    "parse_positive_amount",
    # Pool record
    "Pool",
    "SCHEMA_VERSION",
    "encode_pool",
    "decode_pool",
    # Payloads
    "TxResult",
    "Deposit",
    "Redemption",
    "SwapReceipt",
    "Forfeiture",
    "Reserves",
    "FeeReserves",
    "SwapFee",
    "ShareBalance",
    "Providers",
    "Failure",
    "OperationResult",
]
