"""Six-decimal fixed-point math library.

Deterministic natural logarithm, exponential and power functions over
integers scaled by SCALE (10^6 represents 1.0). The structure follows
Balancer's LogExpMath.sol: powers of e are extracted from the argument first
so that the short series at the end only ever sees a small remainder.

No floating point is used anywhere. Every multiply-then-divide step runs on
Python's arbitrary-precision integers, so the full product always exists
before the division.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "LogExpMathError",
    "NonPositiveLogArgument",
    "InvalidExponent",
    "ProductOutOfBounds",
    # Functions
    "mul_div",
    "ln",
    "exp",
    "power",
    # Constants
    "SCALE",
    "LN_SERIES_TERMS",
    "EXP_SERIES_TERMS",
    "MAX_NATURAL_EXPONENT",
]

# =============================================================================
# Constants
# =============================================================================

SCALE = 10**6

LN_SERIES_TERMS = 10
EXP_SERIES_TERMS = 10

MAX_NATURAL_EXPONENT = 130 * SCALE  # e^130 is the max we can handle

# (x, e^x) pairs, both scaled by SCALE, largest first.
# Extracting these leaves a remainder below e^0.0625 for the series.
E_POWERS = (
    (128 * SCALE, 38877084059945950922200000000000000000000000000000000000 * SCALE),  # e^128
    (64 * SCALE, 6235149080811616882910000000 * SCALE),  # e^64
    (32 * SCALE, 78_962_960_182_680_695_161),  # e^32
    (16 * SCALE, 8_886_110_520_508),  # e^16
    (8 * SCALE, 2_980_957_987),  # e^8
    (4 * SCALE, 54_598_150),  # e^4
    (2 * SCALE, 7_389_056),  # e^2
    (1 * SCALE, 2_718_282),  # e^1
    (500_000, 1_648_721),  # e^0.5
    (250_000, 1_284_025),  # e^0.25
    (125_000, 1_133_148),  # e^0.125
    (62_500, 1_064_494),  # e^0.0625
)


# =============================================================================
# Error classes
# =============================================================================


class LogExpMathError(Exception):
    """Base error for LogExpMath operations."""

    pass


class NonPositiveLogArgument(LogExpMathError):
    """Logarithm requested for a value <= 0."""

    pass


class InvalidExponent(LogExpMathError):
    """Exponent is outside [-MAX_NATURAL_EXPONENT, MAX_NATURAL_EXPONENT]."""

    pass


class ProductOutOfBounds(LogExpMathError):
    """Result of y * ln(x) is too large for exp."""

    pass


# =============================================================================
# Core math functions
# =============================================================================


def mul_div(a: int, b: int, c: int) -> int:
    """Compute a * b // c with the full product formed before dividing.

    Args:
        a: First factor (non-negative)
        b: Second factor (non-negative)
        c: Divisor (must be non-zero)

    Returns:
        floor(a * b / c)

    Raises:
        ZeroDivisionError: If c is zero
    """
    if c == 0:
        raise ZeroDivisionError(f"Division by zero in mul_div({a}, {b}, 0)")
    return (a * b) // c


def ln(x: int) -> tuple[bool, int]:
    """Compute the signed natural logarithm of x (SCALE fixed-point).

    Values below 1.0 are handled through the reciprocal: ln(x) = -ln(1/x).
    After extracting powers of e, the remainder x' sits in [1, e^0.0625) and
    z = (x' - 1) / x' is small. Then ln(x') = -ln(1 - z), whose Mercator
    series is z + z^2/2 + z^3/3 + ... (the alternating series of ln(1 + u)
    evaluated at u = -z, so every term has the same sign).

    The powers of e are divided out first because a ten-term series only
    converges fast near 1. Run on the raw argument, it drifts far from the
    true logarithm once x leaves that neighbourhood, and power(x, SCALE) no
    longer returns x to within a few units.

    Args:
        x: Input value, must be positive.

    Returns:
        Tuple of (negative, magnitude) where magnitude is |ln(x)| scaled by SCALE.

    Raises:
        NonPositiveLogArgument: If x <= 0
    """
    if x <= 0:
        raise NonPositiveLogArgument(f"log undefined for x <= 0, got {x}")

    negative = False
    if x < SCALE:
        x = (SCALE * SCALE) // x
        negative = True

    result = 0
    for exponent, e_power in E_POWERS:
        if x >= e_power:
            x = (x * SCALE) // e_power
            result += exponent

    z = ((x - SCALE) * SCALE) // x
    term = z
    series = z
    for k in range(2, LN_SERIES_TERMS + 1):
        term = (term * z) // SCALE
        series += term // k

    return negative, result + series


def exp(x: int) -> int:
    """Compute e^x where x is SCALE fixed-point.

    Args:
        x: Exponent in SCALE fixed-point (can be negative).

    Returns:
        e^x as SCALE fixed-point integer.

    Raises:
        InvalidExponent: If |x| > MAX_NATURAL_EXPONENT
    """
    if not (-MAX_NATURAL_EXPONENT <= x <= MAX_NATURAL_EXPONENT):
        raise InvalidExponent(f"Exponent {x} outside valid range")

    if x < 0:
        # e^-x = 1 / e^x
        return (SCALE * SCALE) // exp(-x)

    product = SCALE
    for exponent, e_power in E_POWERS:
        if x >= exponent:
            x -= exponent
            product = (product * e_power) // SCALE

    # Taylor series: 1 + x + x^2/2! + ... + x^10/10!
    series = SCALE
    term = SCALE
    for k in range(1, EXP_SERIES_TERMS + 1):
        term = (term * x) // (k * SCALE)
        series += term

    return (product * series) // SCALE


def power(x: int, y: int) -> int:
    """Compute x^y where both are SCALE fixed-point, as e^(y * ln(x)).

    Args:
        x: Base (non-negative)
        y: Exponent (non-negative)

    Returns:
        x^y as SCALE fixed-point. Results too small to represent are 0.

    Raises:
        ProductOutOfBounds: If x > 1 and y * ln(x) exceeds MAX_NATURAL_EXPONENT
    """
    if x == 0:
        return 0
    if y == 0:
        return SCALE

    negative, ln_x = ln(x)
    y_ln_x = (y * ln_x) // SCALE

    if negative:
        if y_ln_x > MAX_NATURAL_EXPONENT:
            return 0
        return (SCALE * SCALE) // exp(y_ln_x)

    if y_ln_x > MAX_NATURAL_EXPONENT:
        raise ProductOutOfBounds(f"Product {y_ln_x} outside valid range")
    return exp(y_ln_x)
