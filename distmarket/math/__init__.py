"""Mathematical utilities for the distribution market.

This package provides deterministic 18-decimal fixed-point arithmetic:
- checked add/sub/mul/div with truncation toward zero
- floor square root
- exp/exp2 via digit extraction and Taylor series
"""

from distmarket.math.errors import (
    DivisionByZero,
    FixedPointError,
    InvalidExponent,
    Overflow,
    Underflow,
)
from distmarket.math.fixed_point import (
    add,
    div,
    exp,
    exp2,
    from_decimal,
    mul,
    mul_div,
    sqrt,
    sub,
    sub_unsigned,
    to_decimal,
)

__all__ = [
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
    "FixedPointError",
    "Overflow",
    "Underflow",
    "DivisionByZero",
    "InvalidExponent",
]
