"""Pool engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from distmarket.constants import DEFAULT_FEE_RATE, DEFAULT_L2_TOLERANCE, INITIAL_SHARES, ONE_18
from distmarket.math.fixed_point import from_decimal


@dataclass(frozen=True)
class PoolConfig:
    """Centralized configuration for a pool engine.

    Attributes:
        fee_rate: Trade fee per unit of L2 distance moved (fixed-point, default: 0.01)
        l2_tolerance: Relative tolerance when matching a curve's L2 norm against
            the pool bound k (fixed-point, default: 0.001)
        initial_shares: LP share supply minted on initialize (default: 1e18)
    """

    fee_rate: int = DEFAULT_FEE_RATE
    l2_tolerance: int = DEFAULT_L2_TOLERANCE
    initial_shares: int = INITIAL_SHARES

    def __post_init__(self) -> None:
        if not 0 <= self.fee_rate < ONE_18:
            raise ValueError(f"fee_rate must be in [0, 1), got {self.fee_rate}")
        if self.l2_tolerance < 0:
            raise ValueError(f"l2_tolerance must be non-negative, got {self.l2_tolerance}")
        if self.initial_shares <= 0:
            raise ValueError(f"initial_shares must be positive, got {self.initial_shares}")

    @classmethod
    def from_env(cls) -> PoolConfig:
        """Build a configuration from environment variables.

        - DISTMARKET_FEE_RATE: decimal fee rate (default: 0.01)
        - DISTMARKET_L2_TOLERANCE: decimal relative tolerance (default: 0.001)
        - DISTMARKET_INITIAL_SHARES: raw integer share supply (default: 1e18)
        """
        fee_rate = os.environ.get("DISTMARKET_FEE_RATE")
        l2_tolerance = os.environ.get("DISTMARKET_L2_TOLERANCE")
        initial_shares = os.environ.get("DISTMARKET_INITIAL_SHARES")
        return cls(
            fee_rate=from_decimal(fee_rate) if fee_rate else DEFAULT_FEE_RATE,
            l2_tolerance=from_decimal(l2_tolerance) if l2_tolerance else DEFAULT_L2_TOLERANCE,
            initial_shares=int(initial_shares) if initial_shares else INITIAL_SHARES,
        )


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
