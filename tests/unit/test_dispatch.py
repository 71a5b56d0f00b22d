"""Tests for the named operation surface."""

import pytest
from structlog.testing import capture_logs

from exchange.dispatch import OPERATIONS, Dispatcher
from exchange.ledger.memory import InMemoryLedger
from exchange.state_machine import PoolStateMachine
from tests.helpers import ALICE, BOB


class TestOperationTable:
    """Tests for the registered operations."""

    def test_all_operations_registered(self):
        assert set(OPERATIONS) == {
            "initialize",
            "createPool",
            "addLiquidity",
            "removeLiquidity",
            "removeAllLiquidity",
            "swapTokensForBase",
            "swapBaseForTokens",
            "removeProvider",
            "getReserves",
            "getSwapFee",
            "getFeeReserves",
            "getLiquidity",
            "getProviders",
        }

    def test_queries_are_read_only(self):
        readers = {name for name, op in OPERATIONS.items() if not op.mutating}
        assert readers == {
            "getReserves",
            "getSwapFee",
            "getFeeReserves",
            "getLiquidity",
            "getProviders",
        }


class TestInvoke:
    """Tests for success and failure envelopes."""

    def test_success_envelope(self, balanced_ledger, machine):
        dispatcher = Dispatcher(balanced_ledger, machine)

        result = dispatcher.invoke(BOB, "swapBaseForTokens", ["10000"])

        assert result.ok is True
        assert result.error is None
        assert result.operation == "swapBaseForTokens"
        assert result.result == {
            "txId": "tx-1",
            "amountIn": "10000",
            "fee": "30",
            "amountOut": "908",
        }

    def test_query_envelope(self, balanced_ledger, machine):
        dispatcher = Dispatcher(balanced_ledger, machine)

        reserves = dispatcher.invoke(BOB, "getReserves")
        fee = dispatcher.invoke(BOB, "getSwapFee")

        assert reserves.result == {"baseReserve": "1000", "tokenReserve": "1000"}
        assert fee.result == {"numerator": 3, "denominator": 1000}

    def test_default_machine(self, ledger):
        dispatcher = Dispatcher(ledger)
        assert isinstance(dispatcher.machine, PoolStateMachine)
        assert dispatcher.invoke(ALICE, "initialize").ok

    def test_failure_envelope(self, dispatcher):
        result = dispatcher.invoke(ALICE, "addLiquidity", ["-5"])

        assert result.ok is False
        assert result.result is None
        assert result.error.kind == "InvalidAmount"
        assert "greater than 0" in result.error.message

    def test_failure_rolls_back(self, balanced_ledger, machine):
        dispatcher = Dispatcher(balanced_ledger, machine)
        before = balanced_ledger.get("pool")

        result = dispatcher.invoke(BOB, "removeLiquidity", ["1"])

        assert result.error.kind == "InsufficientShares"
        assert balanced_ledger.get("pool") == before
        assert balanced_ledger.commit_count == 0

    def test_empty_caller(self, dispatcher, ledger):
        result = dispatcher.invoke("", "getReserves")

        assert result.ok is False
        assert result.error.kind == "InvalidCaller"
        assert ledger.commit_count == 0

    def test_unknown_operation(self, dispatcher, ledger):
        result = dispatcher.invoke(ALICE, "drainPool")

        assert result.error.kind == "UnknownOperation"
        assert ledger.commit_count == 0

    @pytest.mark.parametrize(
        "operation,args",
        [
            ("createPool", []),
            ("createPool", ["1", "2"]),
            ("initialize", ["x"]),
            ("removeLiquidity", ["1", "0", "0", "0"]),
            ("getLiquidity", [ALICE, BOB]),
        ],
    )
    def test_wrong_arity(self, dispatcher, operation, args):
        result = dispatcher.invoke(ALICE, operation, args)

        assert result.error.kind == "UnknownOperation"
        assert operation in result.error.message

    def test_corrupt_record(self, machine):
        dispatcher = Dispatcher(InMemoryLedger({"pool": b"not json"}), machine)

        with capture_logs() as logs:
            result = dispatcher.invoke(ALICE, "getReserves")

        assert result.error.kind == "StoreFailure"
        assert [entry["event"] for entry in logs] == ["store_failure"]
        assert logs[0]["log_level"] == "error"

    def test_rejection_logged(self, dispatcher):
        with capture_logs() as logs:
            dispatcher.invoke(ALICE, "swapBaseForTokens", ["100"])

        assert logs == [
            {
                "event": "operation_rejected",
                "log_level": "warning",
                "operation": "swapBaseForTokens",
                "caller": ALICE,
                "kind": "EmptyPool",
                "reason": "pool has no liquidity on both sides",
            }
        ]

    def test_mutation_logged(self, dispatcher):
        with capture_logs() as logs:
            dispatcher.invoke(ALICE, "createPool", ["1000"])

        events = [entry["event"] for entry in logs]
        assert "pool_created" in events
