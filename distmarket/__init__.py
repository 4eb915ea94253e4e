"""Distribution market core - Python implementation.

Prices and settles trades against a market shaped as a scaled Gaussian curve.
"""

from distmarket.curves.gaussian import ZERO_CURVE, GaussianCurve
from distmarket.pool.config import DEFAULT_POOL_CONFIG, PoolConfig
from distmarket.pool.engine import PoolEngine

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_POOL_CONFIG",
    "GaussianCurve",
    "PoolConfig",
    "PoolEngine",
    "ZERO_CURVE",
    "__version__",
]
