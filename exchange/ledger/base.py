"""Backing store contract for the pool state machine.

The state machine only needs a transaction-scoped key/value view plus the
identity of the caller and of the transaction. Any store that can provide
serializable read-modify-write transactions can host the pool.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol, runtime_checkable

from exchange.errors import InvalidCaller


@runtime_checkable
class Transaction(Protocol):
    """One serializable unit of work against the ledger.

    Reads observe the snapshot taken when the transaction began plus the
    transaction's own writes. Writes become visible to others only when the
    ledger commits the transaction.
    """

    def read(self, key: str) -> bytes | None:
        """Return the value stored under key, or None if absent."""
        ...

    def write(self, key: str, data: bytes) -> None:
        """Stage a value to be committed under key."""
        ...

    def caller_identity(self) -> str:
        """Opaque identity of the party invoking the operation."""
        ...

    def transaction_id(self) -> str:
        """Opaque identifier of this transaction."""
        ...


class Ledger(Protocol):
    """A store that opens transactions on behalf of callers."""

    def transaction(self, caller: str) -> AbstractContextManager[Transaction]:
        """Open a transaction for caller.

        Leaving the context normally commits every staged write at once;
        leaving it with an exception discards them.
        """
        ...


class Snapshot(Protocol):
    """Committed state visible to a transaction when it began."""

    def get(self, key: str) -> bytes | None: ...


class BufferedTransaction:
    """Transaction that stages writes in memory until the ledger commits."""

    def __init__(self, snapshot: Snapshot, caller: str, tx_id: str) -> None:
        if not isinstance(caller, str) or not caller:
            raise InvalidCaller("caller identity must be a non-empty string")
        self._snapshot = snapshot
        self._caller = caller
        self._tx_id = tx_id
        self.pending: dict[str, bytes] = {}

    def read(self, key: str) -> bytes | None:
        if key in self.pending:
            return self.pending[key]
        return self._snapshot.get(key)

    def write(self, key: str, data: bytes) -> None:
        self.pending[key] = bytes(data)

    def caller_identity(self) -> str:
        return self._caller

    def transaction_id(self) -> str:
        return self._tx_id
