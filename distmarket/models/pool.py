"""Persisted pool records.

PoolRecord is the flat record a storage collaborator keeps for one pool:
the PoolState fields plus the share ledger keyed by owner and the
per-position redemption ledger.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from distmarket.curves.gaussian import GaussianCurve
from distmarket.pool.state import PoolState, Position

from .types import Int256, Uint256


class CurveRecord(BaseModel):
    """Serialized GaussianCurve."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mu: Int256
    sigma: Uint256
    lam: Uint256 = Field(alias="lambda")

    @classmethod
    def from_curve(cls, curve: GaussianCurve) -> CurveRecord:
        return cls(mu=str(curve.mu), sigma=str(curve.sigma), **{"lambda": str(curve.lam)})

    def to_curve(self) -> GaussianCurve:
        return GaussianCurve(mu=int(self.mu), sigma=int(self.sigma), lam=int(self.lam))


class PositionRecord(BaseModel):
    """Serialized Position, as a registry collaborator would store it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    owner: str
    collateral: Uint256
    initial_curve: CurveRecord = Field(alias="initialCurve")
    target_curve: CurveRecord | None = Field(default=None, alias="targetCurve")
    shares: Uint256 = "0"

    @classmethod
    def from_position(cls, position: Position) -> PositionRecord:
        target = position.target_curve
        return cls(
            owner=position.owner,
            collateral=str(position.collateral),
            initialCurve=CurveRecord.from_curve(position.initial_curve),
            targetCurve=CurveRecord.from_curve(target) if target is not None else None,
            shares=str(position.shares),
        )

    def to_position(self) -> Position:
        return Position(
            owner=self.owner,
            collateral=int(self.collateral),
            initial_curve=self.initial_curve.to_curve(),
            target_curve=self.target_curve.to_curve() if self.target_curve else None,
            shares=int(self.shares),
        )


class PoolRecord(BaseModel):
    """Serialized PoolState.

    Field names use camelCase aliases in JSON, matching the record layout
    storage collaborators exchange.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    curve: CurveRecord
    collateral: Uint256
    l2_bound: Uint256 = Field(alias="l2Bound")
    k_to_b_ratio: Uint256 = Field(alias="kToBRatio")
    min_sigma: Uint256 = Field(alias="minSigma")
    total_shares: Uint256 = Field(alias="totalShares")
    shares: dict[str, Uint256] = Field(default_factory=dict, alias="shareLedger")
    redeemed: dict[int, Uint256] = Field(default_factory=dict)
    paid_out: Uint256 = Field(default="0", alias="paidOut")

    @classmethod
    def from_state(cls, state: PoolState) -> PoolRecord:
        return cls(
            curve=CurveRecord.from_curve(state.curve),
            collateral=str(state.collateral),
            l2Bound=str(state.l2_bound),
            kToBRatio=str(state.k_to_b_ratio),
            minSigma=str(state.min_sigma),
            totalShares=str(state.total_shares),
            shareLedger={owner: str(n) for owner, n in state.shares.items()},
            redeemed={pid: str(n) for pid, n in state.redeemed.items()},
            paidOut=str(state.paid_out),
        )

    def to_state(self) -> PoolState:
        return PoolState(
            curve=self.curve.to_curve(),
            collateral=int(self.collateral),
            l2_bound=int(self.l2_bound),
            k_to_b_ratio=int(self.k_to_b_ratio),
            min_sigma=int(self.min_sigma),
            total_shares=int(self.total_shares),
            shares={owner: int(n) for owner, n in self.shares.items()},
            redeemed={pid: int(n) for pid, n in self.redeemed.items()},
            paid_out=int(self.paid_out),
        )
