"""18-decimal fixed-point math library.

All values are Python ints scaled by 10^18. Every operation is deterministic:
multiplication and division truncate toward zero, square roots round down, and
results outside the int256 range raise Overflow instead of wrapping.

The exponential follows Balancer's LogExpMath.sol: large powers of e are
extracted from precomputed tables, and the remainder is summed as a 12-term
Taylor series at 20-decimal precision.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from distmarket.constants import INT256_MAX, INT256_MIN, LN2, ONE_18

from .errors import DivisionByZero, InvalidExponent, Overflow, Underflow

__all__ = [
    # Functions
    "add",
    "sub",
    "sub_unsigned",
    "mul",
    "div",
    "mul_div",
    "sqrt",
    "exp",
    "exp2",
    "from_decimal",
    "to_decimal",
    # Constants
    "ONE_20",
    "MAX_NATURAL_EXPONENT",
    "MIN_NATURAL_EXPONENT",
]

# =============================================================================
# Constants
# =============================================================================

ONE_20 = 10**20

MAX_NATURAL_EXPONENT = 130 * ONE_18  # e^130 is the max we can handle
MIN_NATURAL_EXPONENT = -41 * ONE_18  # e^-41 rounds to a single unit

# x values are exponents (powers of 2), a values are e^x

# 18-decimal precision constants (for large exponents)
X_18 = (128 * ONE_18, 64 * ONE_18)
A_18 = (
    38877084059945950922200000000000000000000000000000000000,  # e^128
    6235149080811616882910000000,  # e^64
)

# 20-decimal precision constants, 2^5 down to 2^-2
X_20 = (
    3_200_000_000_000_000_000_000,
    1_600_000_000_000_000_000_000,
    800_000_000_000_000_000_000,
    400_000_000_000_000_000_000,
    200_000_000_000_000_000_000,
    100_000_000_000_000_000_000,
    50_000_000_000_000_000_000,
    25_000_000_000_000_000_000,
)
A_20 = (
    7_896_296_018_268_069_516_100_000_000_000_000,  # e^32
    888_611_052_050_787_263_676_000_000,  # e^16
    298_095_798_704_172_827_474_000,  # e^8
    5_459_815_003_314_423_907_810,  # e^4
    738_905_609_893_065_022_723,  # e^2
    271_828_182_845_904_523_536,  # e^1
    164_872_127_070_012_814_685,  # e^0.5
    128_402_541_668_774_148_407,  # e^0.25
)

TAYLOR_TERMS = 12


# =============================================================================
# Basic arithmetic
# =============================================================================


def _check_range(value: int, op: str) -> int:
    if not INT256_MIN <= value <= INT256_MAX:
        raise Overflow(f"{op} result {value} outside int256 range")
    return value


def _div_trunc(a: int, b: int) -> int:
    """Integer division with truncation toward zero.

    Python's // operator rounds toward negative infinity, which differs from
    truncation whenever exactly one operand is negative:
        -7 // 3 == -3, but truncation gives -2.

    Raises:
        DivisionByZero: If b is zero
    """
    if b == 0:
        raise DivisionByZero(f"Division by zero: {a} / 0")
    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


def add(a: int, b: int) -> int:
    """Signed addition, checked against int256."""
    return _check_range(a + b, "add")


def sub(a: int, b: int) -> int:
    """Signed subtraction, checked against int256."""
    return _check_range(a - b, "sub")


def sub_unsigned(a: int, b: int) -> int:
    """Unsigned subtraction.

    Raises:
        Underflow: If b > a
    """
    if b > a:
        raise Underflow(f"Underflow: {a} - {b}")
    return a - b


def mul(a: int, b: int) -> int:
    """Multiply two fixed-point values: a * b / 10^18, truncated toward zero.

    Raises:
        Overflow: If the unscaled product a * b exceeds int256
    """
    product = _check_range(a * b, "mul")
    return _div_trunc(product, ONE_18)


def div(a: int, b: int) -> int:
    """Divide two fixed-point values: a * 10^18 / b, truncated toward zero.

    Raises:
        DivisionByZero: If b is zero
        Overflow: If a * 10^18 exceeds int256
    """
    if b == 0:
        raise DivisionByZero(f"Fixed-point division by zero: {a} / 0")
    numerator = _check_range(a * ONE_18, "div")
    return _div_trunc(numerator, b)


def mul_div(a: int, b: int, c: int) -> int:
    """Compute a * b / c at full precision, truncated toward zero.

    Used for pro-rating (shares * collateral / total_shares) where the scale
    cancels out and an intermediate rounding step would lose precision.

    Raises:
        DivisionByZero: If c is zero
        Overflow: If a * b exceeds int256
    """
    product = _check_range(a * b, "mul_div")
    return _div_trunc(product, c)


def sqrt(a: int) -> int:
    """Fixed-point square root, rounded down. sqrt(0) == 0.

    Raises:
        Underflow: If a is negative
    """
    if a < 0:
        raise Underflow(f"Square root of negative value {a}")
    return math.isqrt(a * ONE_18)


# =============================================================================
# Exponential
# =============================================================================


def exp(x: int) -> int:
    """Compute e^x where x is 18-decimal fixed-point.

    exp(0) == 10^18 exactly; the result is positive and non-decreasing over
    the whole domain.

    Raises:
        InvalidExponent: If x is outside [MIN_NATURAL_EXPONENT, MAX_NATURAL_EXPONENT]
    """
    if not (MIN_NATURAL_EXPONENT <= x <= MAX_NATURAL_EXPONENT):
        raise InvalidExponent(f"Exponent {x} outside valid range")

    if x < 0:
        # e^-x = 1 / e^x
        return (ONE_18 * ONE_18) // exp(-x)

    first_an = 1
    for x_n, a_n in zip(X_18, A_18, strict=True):
        if x >= x_n:
            x -= x_n
            first_an = a_n
            break

    # Scale to 20-decimal precision
    x *= 100

    product = ONE_20
    for x_n, a_n in zip(X_20, A_20, strict=True):
        if x >= x_n:
            x -= x_n
            product = (product * a_n) // ONE_20

    # Taylor series for the remainder (x < 0.25)
    series_sum = ONE_20 + x
    term = x
    for i in range(2, TAYLOR_TERMS + 1):
        term = ((term * x) // ONE_20) // i
        series_sum += term

    return (((product * series_sum) // ONE_20) * first_an) // 100


def exp2(x: int) -> int:
    """Compute 2^x where x is 18-decimal fixed-point, as e^(x * ln 2)."""
    return exp(mul(x, LN2))


# =============================================================================
# Conversion helpers
# =============================================================================


def from_decimal(d: Decimal | str | int) -> int:
    """Convert a decimal value to fixed-point (ROUND_HALF_UP)."""
    scaled = (Decimal(d) * ONE_18).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(scaled)


def to_decimal(value: int) -> Decimal:
    """Convert a fixed-point value to Decimal for display."""
    return Decimal(value) / Decimal(ONE_18)
