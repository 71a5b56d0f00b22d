"""Checked integer arithmetic for pool amounts.

Pool amounts are arbitrary-precision, non-negative integers. Wrapping them
in SafeInt keeps them that way: dividing by an empty reserve or share supply
raises DivisionByZero, and paying out more than a balance holds raises
Underflow, instead of silently producing a negative or failing with a bare
ZeroDivisionError.

    from exchange.safe_int import S, mul_div

    token_out = mul_div(shares, token_reserve, total_shares)
    reserve = (S(reserve) - S(token_out)).value
"""

from __future__ import annotations


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""


class DivisionByZero(SafeIntError):
    """Division by a zero amount."""


class Underflow(SafeIntError):
    """Subtraction would leave a negative amount."""


class SafeInt:
    """Non-negative-preserving integer wrapper.

    Only the operations pool accounting needs are defined; comparisons and
    formatting go through ``.value``.
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _unwrap(other))

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Raises Underflow if the result would be negative."""
        other_val = _unwrap(other)
        if other_val > self._value:
            raise Underflow(f"Underflow: {self._value} - {other_val}")
        return SafeInt(self._value - other_val)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _unwrap(other))

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Floor division. Raises DivisionByZero if other is zero."""
        other_val = _unwrap(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0


def mul_div(a: int, b: int, c: int) -> int:
    """floor(a * b / c), the rounding every pool formula uses.

    Raises:
        DivisionByZero: If c is zero
    """
    return (S(a) * S(b) // S(c)).value


def _unwrap(x: SafeInt | int) -> int:
    if isinstance(x, SafeInt):
        return x._value
    return x


S = SafeInt
