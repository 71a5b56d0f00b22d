"""Shared type definitions for pool models.

Amounts cross every boundary (ledger record, operation arguments, results)
as base-10 decimal strings of unbounded length and are held in memory as
Python ints.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer

from exchange.errors import InvalidAmount

_DECIMAL_RE = re.compile(r"[0-9]+")


def validate_amount(value: Any) -> int:
    """Validate that a value is a non-negative integer amount.

    Args:
        value: Value to validate (decimal string or int)

    Returns:
        The amount as an int

    Raises:
        ValueError: If value is not a non-negative base-10 integer
    """
    # Accept int directly (legacy records store amounts as JSON numbers)
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise ValueError(f"Amount cannot be negative: {value}")
        return value

    if not isinstance(value, str):
        raise ValueError(f"Amount must be string or int, got {type(value).__name__}")

    if not _DECIMAL_RE.fullmatch(value):
        raise ValueError(f"Amount must be a non-negative decimal integer string: '{value}'")

    return int(value)


# Arbitrary-precision non-negative integer, serialized as decimal string
Amount = Annotated[
    int,
    BeforeValidator(validate_amount),
    PlainSerializer(str, return_type=str),
    Field(description="Non-negative integer as decimal string"),
]


def parse_amount(raw: str | int, name: str = "amount") -> int:
    """Parse a caller-supplied amount.

    Leading sign characters, whitespace, and digit separators are rejected:
    only plain base-10 digits are accepted.

    Raises:
        InvalidAmount: If raw is not a non-negative decimal integer
    """
    try:
        return validate_amount(raw)
    except ValueError as err:
        raise InvalidAmount(f"invalid {name}: {raw!r}") from err


def parse_positive_amount(raw: str | int, name: str = "amount") -> int:
    """Parse a caller-supplied amount that must be greater than zero.

    Raises:
        InvalidAmount: If raw is unparsable, zero, or negative
    """
    if isinstance(raw, str) and raw.startswith("-") and _DECIMAL_RE.fullmatch(raw[1:]):
        raise InvalidAmount(f"{name} must be greater than 0: {raw}")
    amount = parse_amount(raw, name)
    if amount <= 0:
        raise InvalidAmount(f"{name} must be greater than 0: {raw}")
    return amount
