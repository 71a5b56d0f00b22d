"""Caller-facing operation surface.

Operations are addressed by name with positional string arguments, the way
an invoking layer (REST gateway, CLI, ledger runtime) forwards them. Each
invocation runs in its own ledger transaction and returns an
OperationResult envelope: the payload on success, or the error kind and
message on failure.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel

from exchange.errors import ExchangeError, StoreFailure, UnknownOperation
from exchange.ledger.base import Ledger
from exchange.models.results import OperationResult
from exchange.state_machine import PoolStateMachine

logger = structlog.get_logger()


@dataclass(frozen=True)
class Operation:
    """An operation exposed to callers."""

    name: str
    handler: Callable[..., BaseModel]
    min_args: int = 0
    max_args: int = 0
    mutating: bool = True

    def check_arity(self, args: Sequence[Any]) -> None:
        if not self.min_args <= len(args) <= self.max_args:
            expected = (
                str(self.min_args)
                if self.min_args == self.max_args
                else f"{self.min_args}-{self.max_args}"
            )
            raise UnknownOperation(
                f"{self.name} takes {expected} arguments, got {len(args)}"
            )


OPERATIONS: dict[str, Operation] = {
    op.name: op
    for op in (
        Operation("initialize", PoolStateMachine.initialize),
        Operation("createPool", PoolStateMachine.create_pool, 1, 1),
        Operation("addLiquidity", PoolStateMachine.add_liquidity, 1, 1),
        Operation("removeLiquidity", PoolStateMachine.remove_liquidity, 1, 3),
        Operation("removeAllLiquidity", PoolStateMachine.remove_all_liquidity, 0, 2),
        Operation("swapTokensForBase", PoolStateMachine.swap_tokens_for_base, 1, 2),
        Operation("swapBaseForTokens", PoolStateMachine.swap_base_for_tokens, 1, 2),
        Operation("removeProvider", PoolStateMachine.remove_provider, 1, 1),
        Operation("getReserves", PoolStateMachine.get_reserves, mutating=False),
        Operation("getSwapFee", PoolStateMachine.get_swap_fee, mutating=False),
        Operation("getFeeReserves", PoolStateMachine.get_fee_reserves, mutating=False),
        Operation("getLiquidity", PoolStateMachine.get_liquidity, 0, 1, mutating=False),
        Operation("getProviders", PoolStateMachine.get_providers, mutating=False),
    )
}


class Dispatcher:
    """Route named operations to the state machine inside ledger transactions.

    Args:
        ledger: Store hosting the pool record
        machine: State machine to run (default: one built with the default config)
    """

    def __init__(self, ledger: Ledger, machine: PoolStateMachine | None = None) -> None:
        self.ledger = ledger
        self.machine = machine or PoolStateMachine()

    def invoke(
        self,
        caller: str,
        operation: str,
        args: Sequence[str] = (),
    ) -> OperationResult:
        """Run one operation as caller.

        ExchangeErrors become failure envelopes and roll the transaction
        back. Any other exception propagates to the invoking layer.
        """
        try:
            op = OPERATIONS.get(operation)
            if op is None:
                raise UnknownOperation(f"unknown operation: {operation}")
            op.check_arity(args)

            with self.ledger.transaction(caller) as tx:
                payload = op.handler(self.machine, tx, *args)
        except StoreFailure as err:
            logger.exception("store_failure", operation=operation, caller=caller)
            return OperationResult.failure(operation, err.kind, str(err))
        except ExchangeError as err:
            logger.warning(
                "operation_rejected",
                operation=operation,
                caller=caller,
                kind=err.kind,
                reason=str(err),
            )
            return OperationResult.failure(operation, err.kind, str(err))

        return OperationResult.success(operation, payload)


__all__ = ["OPERATIONS", "Dispatcher", "Operation"]
