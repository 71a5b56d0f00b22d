"""Pydantic models for operation payloads returned to callers.

Amounts serialize as decimal strings; keys are camelCase on the wire.
"""

from typing import Any

from pydantic import BaseModel, Field

from exchange.models.types import Amount


class TxResult(BaseModel):
    """Acknowledgement of a committed mutating operation."""

    tx_id: str = Field(alias="txId", description="Transaction identifier from the ledger.")

    model_config = {"populate_by_name": True}


class Deposit(TxResult):
    """Result of addLiquidity."""

    base_amount: Amount = Field(alias="baseAmount")
    token_amount: Amount = Field(alias="tokenAmount", description="Paired token amount deposited.")
    shares: Amount = Field(description="Shares minted to the caller.")


class Redemption(TxResult):
    """Result of removeLiquidity / removeAllLiquidity."""

    shares: Amount = Field(description="Shares burned.")
    base_out: Amount = Field(alias="baseOut")
    token_out: Amount = Field(alias="tokenOut")


class SwapReceipt(TxResult):
    """Result of a swap."""

    amount_in: Amount = Field(alias="amountIn")
    fee: Amount = Field(description="Fee withheld from the input into the fee reserve.")
    amount_out: Amount = Field(alias="amountOut")


class Forfeiture(TxResult):
    """Result of the administrative removeProvider."""

    provider: str
    shares: Amount = Field(description="Shares cancelled.")


class Reserves(BaseModel):
    base_reserve: Amount = Field(alias="baseReserve")
    token_reserve: Amount = Field(alias="tokenReserve")

    model_config = {"populate_by_name": True}


class FeeReserves(BaseModel):
    base_fee_reserve: Amount = Field(alias="baseFeeReserve")
    token_fee_reserve: Amount = Field(alias="tokenFeeReserve")

    model_config = {"populate_by_name": True}


class SwapFee(BaseModel):
    """Swap fee as a fraction."""

    numerator: int
    denominator: int


class ShareBalance(BaseModel):
    provider: str
    shares: Amount


class Providers(BaseModel):
    providers: list[str] = Field(default_factory=list, description="In order of first deposit.")


class Failure(BaseModel):
    """Structured failure reported to callers."""

    kind: str
    message: str


class OperationResult(BaseModel):
    """Envelope returned by the operation surface."""

    operation: str
    ok: bool
    result: dict[str, Any] | None = None
    error: Failure | None = None

    @classmethod
    def success(cls, operation: str, payload: BaseModel) -> "OperationResult":
        return cls(
            operation=operation,
            ok=True,
            result=payload.model_dump(by_alias=True, mode="json"),
        )

    @classmethod
    def failure(cls, operation: str, kind: str, message: str) -> "OperationResult":
        return cls(operation=operation, ok=False, error=Failure(kind=kind, message=message))
