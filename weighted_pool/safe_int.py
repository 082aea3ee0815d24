"""Checked integer wrapper for pool balances and share amounts.

Reserve balances, contributions and share counters live in the native
ledger's unsigned 64-bit range. SafeInt keeps the bookkeeping honest:
- Subtraction below zero raises Underflow (balances are never negative)
- Division by zero raises DivisionByZero
- Values leaving the engine are checked against uint64 with to_uint64()

Usage pattern:
    from weighted_pool.safe_int import S

    balance = (S(balance) - payout).to_uint64()
"""

from __future__ import annotations

from functools import total_ordering

UINT64_MAX = 2**64 - 1


class SafeIntError(ArithmeticError):
    """Base class for checked amount arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """An amount was divided by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce a negative amount."""

    pass


class Uint64Overflow(SafeIntError):
    """Amount does not fit in the ledger's uint64 range."""

    pass


def _as_int(operand: SafeInt | int) -> int:
    return operand.value if isinstance(operand, SafeInt) else operand


@total_ordering
class SafeInt:
    """Integer amount with checked subtraction and division.

    Intermediate values may leave the uint64 range (Python ints do not
    overflow); the range is enforced when the result is stored, through
    to_uint64().
    """

    __slots__ = ("value",)

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            value = value.value
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Amount must be an int, got {type(value).__name__}")
        self.value: int = value

    def __repr__(self) -> str:
        return f"S({self.value})"

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self.value + _as_int(other))

    __radd__ = __add__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract, refusing to go below zero.

        Raises:
            Underflow: If other is larger than self
        """
        amount = _as_int(other)
        if amount > self.value:
            raise Underflow(f"Cannot take {amount} from {self.value}")
        return SafeInt(self.value - amount)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self.value * _as_int(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        divisor = _as_int(other)
        if divisor == 0:
            raise DivisionByZero(f"Cannot divide {self.value} by zero")
        return SafeInt(self.value // divisor)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt | int):
            return self.value == _as_int(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self.value < _as_int(other)

    def __int__(self) -> int:
        return self.value

    def __bool__(self) -> bool:
        return bool(self.value)

    def is_uint64(self) -> bool:
        return 0 <= self.value <= UINT64_MAX

    def to_uint64(self) -> int:
        """Return the plain int, checked against the ledger's range.

        Raises:
            Uint64Overflow: If the value is negative or above 2^64-1
        """
        if not self.is_uint64():
            raise Uint64Overflow(f"{self.value} is outside the uint64 range")
        return self.value


# Short alias used in bookkeeping expressions
S = SafeInt
