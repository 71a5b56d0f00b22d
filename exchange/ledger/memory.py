"""In-process ledger."""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog

from exchange.ledger.base import BufferedTransaction

logger = structlog.get_logger()


def new_transaction_id() -> str:
    return uuid.uuid4().hex


class InMemoryLedger:
    """Dictionary-backed ledger with serialized transactions.

    A lock is held for the whole life of a transaction, so concurrent
    invocations are linearized: each one sees every commit that finished
    before it started. Transactions must not be nested on the same ledger.
    """

    def __init__(
        self,
        data: dict[str, bytes] | None = None,
        id_factory: Callable[[], str] = new_transaction_id,
    ) -> None:
        self._data: dict[str, bytes] = dict(data or {})
        self._lock = threading.Lock()
        self._id_factory = id_factory
        self.commit_count = 0

    @contextmanager
    def transaction(self, caller: str) -> Iterator[BufferedTransaction]:
        with self._lock:
            tx = BufferedTransaction(self._data, caller, self._id_factory())
            yield tx
            if tx.pending:
                self._data.update(tx.pending)
                self.commit_count += 1
                logger.debug("ledger_commit", tx_id=tx.transaction_id(), keys=sorted(tx.pending))

    def get(self, key: str) -> bytes | None:
        """Committed value under key, outside of any transaction."""
        with self._lock:
            return self._data.get(key)
