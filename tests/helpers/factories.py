"""Factory functions for ledgers and transactions in tests.

Usage:
    from tests.helpers import ALICE, run, seed_ledger

    ledger = seed_ledger(Pool(base_reserve=1000, token_reserve=1000))
    receipt = run(ledger, machine, ALICE, "swap_base_for_tokens", "100")
"""

import itertools
from collections.abc import Callable
from typing import Any

from exchange.ledger.base import Ledger
from exchange.ledger.memory import InMemoryLedger
from exchange.models.pool import Pool, encode_pool
from exchange.state_machine import PoolStateMachine


def counting_ids(prefix: str = "tx") -> Callable[[], str]:
    """Transaction id factory yielding tx-1, tx-2, ..."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


def seed_ledger(pool: Pool, key: str = "pool") -> InMemoryLedger:
    """Create an in-memory ledger that already holds pool under key."""
    return InMemoryLedger({key: encode_pool(pool)}, id_factory=counting_ids())


def run(ledger: Ledger, machine: PoolStateMachine, caller: str, method: str, *args: Any) -> Any:
    """Invoke one state machine method as caller in its own transaction."""
    with ledger.transaction(caller) as tx:
        return getattr(machine, method)(tx, *args)


def read_pool(ledger: Ledger, machine: PoolStateMachine) -> Pool:
    """Load the committed pool snapshot."""
    with ledger.transaction("reader") as tx:
        return machine.load(tx)
