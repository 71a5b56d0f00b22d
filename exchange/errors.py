"""Exchange error classes.

Each error carries a stable ``kind`` that the operation surface reports
back to callers alongside the human-readable message.
"""

from typing import ClassVar


class ExchangeError(Exception):
    """Base error for pool operations."""

    kind: ClassVar[str] = "ExchangeError"


class InvalidAmount(ExchangeError):
    """Amount is non-numeric, zero, or negative."""

    kind = "InvalidAmount"


class AlreadyInitialized(ExchangeError):
    """Pool already holds reserves or a genesis record."""

    kind = "AlreadyInitialized"


class Uninitialized(ExchangeError):
    """Pool state does not support the requested operation yet."""

    kind = "Uninitialized"


class EmptyPool(Uninitialized):
    """Swap against a pool with an empty reserve."""

    kind = "EmptyPool"


class InsufficientShares(ExchangeError):
    """Caller holds fewer shares than requested."""

    kind = "InsufficientShares"


class NoLiquidity(ExchangeError):
    """No shares to redeem."""

    kind = "NoLiquidity"


class InvalidIndex(ExchangeError):
    """Provider index out of range."""

    kind = "InvalidIndex"


class SlippageExceeded(ExchangeError):
    """Computed output is below the caller's minimum."""

    kind = "SlippageExceeded"


class StoreFailure(ExchangeError):
    """Backing store read, write or (de)serialization failed."""

    kind = "StoreFailure"


class UnknownOperation(ExchangeError):
    """Operation name or arity not recognised by the dispatcher."""

    kind = "UnknownOperation"


class InvalidCaller(ExchangeError):
    """Caller identity is missing or empty."""

    kind = "InvalidCaller"
