"""Error classes for the distribution market core.

Pool-level failures derive from MarketError. Arithmetic failures live in
distmarket.math.errors and are re-exported here so callers can catch every
failure kind from one place.
"""

from distmarket.math.errors import (
    DivisionByZero,
    FixedPointError,
    InvalidExponent,
    Overflow,
    Underflow,
)


class MarketError(Exception):
    """Base error for pool operations."""

    pass


class InvalidParameters(MarketError):
    """Malformed or out-of-range constructor or curve input."""

    pass


class InvariantViolation(MarketError):
    """Proposed curve does not match the pool's L2-norm bound."""

    pass


class InsufficientCollateral(MarketError):
    """Trader collateral does not cover the worst-case loss of the position."""

    pass


class InsufficientBacking(MarketError):
    """Pool collateral does not cover the curve's worst-case payout."""

    pass


class InsufficientShares(MarketError):
    """Caller holds fewer LP shares than requested."""

    pass


class InvalidAmount(MarketError):
    """Amount or share count violates share accounting rules."""

    pass


class Unauthorized(MarketError):
    """Caller does not own the position."""

    pass


class NotInitialized(MarketError):
    """Operation requires an initialized pool."""

    pass


class AlreadyInitialized(MarketError):
    """Pool was already initialized."""

    pass


__all__ = [
    "MarketError",
    "InvalidParameters",
    "InvariantViolation",
    "InsufficientCollateral",
    "InsufficientBacking",
    "InsufficientShares",
    "InvalidAmount",
    "Unauthorized",
    "NotInitialized",
    "AlreadyInitialized",
    "FixedPointError",
    "Overflow",
    "Underflow",
    "DivisionByZero",
    "InvalidExponent",
]
