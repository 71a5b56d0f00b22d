"""Ledgers that can host the pool record."""

from exchange.ledger.base import BufferedTransaction, Ledger, Transaction
from exchange.ledger.file import FileLedger
from exchange.ledger.memory import InMemoryLedger

__all__ = [
    "Transaction",
    "Ledger",
    "BufferedTransaction",
    "InMemoryLedger",
    "FileLedger",
]
