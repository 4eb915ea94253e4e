"""Pydantic records for persisting pool state and positions."""

from distmarket.models.pool import CurveRecord, PoolRecord, PositionRecord
from distmarket.models.types import Int256, Uint256

__all__ = [
    "CurveRecord",
    "PositionRecord",
    "PoolRecord",
    "Int256",
    "Uint256",
]
