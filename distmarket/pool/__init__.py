"""Distribution market pool: state, transitions, collateral policy and engine."""

from .collateral import backing_required, find_critical_point, required_collateral, trade_fee
from .config import DEFAULT_POOL_CONFIG, PoolConfig
from .engine import LiquidityReceipt, PoolEngine, TradeReceipt
from .interfaces import CollateralTransfer, PositionRegistry
from .memory import InMemoryCollateralLedger, InMemoryPositionRegistry
from .state import PoolState, PoolStatus, Position
from .transitions import Transition, TransferDirection, TransferRequest

__all__ = [
    # Engine
    "PoolEngine",
    "LiquidityReceipt",
    "TradeReceipt",
    # State
    "PoolState",
    "PoolStatus",
    "Position",
    # Transitions
    "Transition",
    "TransferDirection",
    "TransferRequest",
    # Collateral policy
    "backing_required",
    "required_collateral",
    "trade_fee",
    "find_critical_point",
    # Configuration
    "PoolConfig",
    "DEFAULT_POOL_CONFIG",
    # Collaborators
    "PositionRegistry",
    "CollateralTransfer",
    "InMemoryPositionRegistry",
    "InMemoryCollateralLedger",
]
