"""Tests for SafeInt checked arithmetic on pool amounts."""

import pytest

from weighted_pool.safe_int import (
    UINT64_MAX,
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Uint64Overflow,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_rejects_bool(self):
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_rejects_float(self):
        with pytest.raises(TypeError):
            SafeInt(1.5)  # type: ignore[arg-type]

    def test_alias(self):
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for checked operators."""

    def test_add_and_radd(self):
        assert S(2) + 3 == 5
        assert 3 + S(2) == 5

    def test_sub(self):
        assert S(10) - 4 == 6

    def test_sub_to_zero(self):
        assert S(10) - S(10) == 0

    def test_sub_below_zero_raises(self):
        """A balance can never go negative."""
        with pytest.raises(Underflow):
            S(3) - 4

    def test_mul_and_rmul(self):
        assert S(6) * 7 == 42
        assert 7 * S(6) == 42

    def test_floordiv(self):
        assert S(10) // 3 == 3

    def test_floordiv_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(10) // 0

    def test_comparisons(self):
        assert S(1) < 2
        assert S(2) <= S(2)
        assert S(3) > 2
        assert S(3) >= S(3)
        assert S(3) != S(4)

    def test_int_and_bool(self):
        assert int(S(9)) == 9
        assert not S(0)
        assert S(1)

    def test_errors_are_arithmetic_errors(self):
        for error in (DivisionByZero, Underflow, Uint64Overflow):
            assert issubclass(error, SafeIntError)
        assert issubclass(SafeIntError, ArithmeticError)


class TestUint64Bounds:
    """Tests for the ledger's uint64 range."""

    def test_max_fits(self):
        assert S(UINT64_MAX).to_uint64() == UINT64_MAX

    def test_above_max_raises(self):
        with pytest.raises(Uint64Overflow):
            (S(UINT64_MAX) + 1).to_uint64()

    def test_negative_raises(self):
        with pytest.raises(Uint64Overflow):
            S(-1).to_uint64()

    def test_is_uint64(self):
        assert S(0).is_uint64()
        assert S(UINT64_MAX).is_uint64()
        assert not S(UINT64_MAX + 1).is_uint64()
        assert not S(-1).is_uint64()
