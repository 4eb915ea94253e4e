"""Pool state and position dataclasses.

PoolState is immutable: transitions build a new state and the engine swaps it
in atomically. The share ledger and redemption ledger are read-only mappings
so a state handed out to callers cannot be mutated behind the engine's back.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType

from distmarket.constants import ONE_18
from distmarket.curves.gaussian import ZERO_CURVE, GaussianCurve, evaluate, l2_norm
from distmarket.math.fixed_point import add, mul, sub, sub_unsigned

from .collateral import backing_required


class PoolStatus(Enum):
    """Lifecycle of a pool as seen by the core."""

    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"


@dataclass(frozen=True)
class Position:
    """A minted market position.

    Trader positions hold target_curve - initial_curve on top of their net
    collateral (amount posted minus the trade fee). LP positions have no
    target: they are receipts for the LP shares minted with them, and
    redeeming one burns those shares.

    Attributes:
        owner: Account the position was minted to
        collateral: Collateral backing the position (fixed-point)
        initial_curve: Curve before the trade, or the LP's slice of the pool curve
        target_curve: Curve after the trade, None for LP positions
        shares: LP shares minted with the position (0 for trader positions)
    """

    owner: str
    collateral: int
    initial_curve: GaussianCurve
    target_curve: GaussianCurve | None = None
    shares: int = 0

    @property
    def is_lp(self) -> bool:
        """True for liquidity-provider positions."""
        return self.target_curve is None

    def value_at(self, outcome: int) -> int:
        """Trader settlement value: collateral - initial(outcome) + target(outcome), floored at 0."""
        value = sub(self.collateral, evaluate(self.initial_curve, outcome))
        if self.target_curve is not None:
            value = add(value, evaluate(self.target_curve, outcome))
        return max(0, value)


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class PoolState:
    """State of an active pool.

    Attributes:
        curve: Current market curve
        collateral: Pool collateral b
        l2_bound: L2-norm bound k, kept equal to k_to_b_ratio * collateral
        k_to_b_ratio: Fixed ratio between k and b
        min_sigma: Smallest sigma a curve may have
        total_shares: Outstanding LP shares
        shares: LP share ledger, owner -> shares
        redeemed: Collateral already redeemed per position id
        paid_out: Settlement payouts made from collateral. b itself is left
            alone so k keeps tracking it; available is what is left to pay.
    """

    curve: GaussianCurve
    collateral: int
    l2_bound: int
    k_to_b_ratio: int
    min_sigma: int
    total_shares: int
    shares: Mapping[str, int] = field(default_factory=dict)
    redeemed: Mapping[int, int] = field(default_factory=dict)
    paid_out: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "shares", _frozen(self.shares))
        object.__setattr__(self, "redeemed", _frozen(self.redeemed))

    @property
    def available(self) -> int:
        """Collateral still held for the pool: b minus settlement payouts."""
        return sub_unsigned(self.collateral, self.paid_out)

    def shares_of(self, owner: str) -> int:
        """LP shares held by owner."""
        return self.shares.get(owner, 0)

    def redeemed_of(self, position_id: int) -> int:
        """Collateral already redeemed from a position."""
        return self.redeemed.get(position_id, 0)

    def evolve(self, **changes: object) -> PoolState:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)  # type: ignore[arg-type]

    def with_collateral(self, collateral: int, curve: GaussianCurve | None = None) -> PoolState:
        """Return a copy with new collateral b, k recomputed and the curve resized.

        The curve's lambda is pro-rated by b' / b so that its self-norm keeps
        tracking k. Pass curve to resize a different curve (e.g. a trade target).
        """
        base = self.curve if curve is None else curve
        return self.evolve(
            collateral=collateral,
            l2_bound=mul(self.k_to_b_ratio, collateral),
            curve=base.scaled(collateral, self.collateral),
        )

    def invariant_violations(self, l2_tolerance: int) -> list[str]:
        """List every broken pool invariant (empty when the state is sound)."""
        problems = []

        rounding = self.collateral // ONE_18 + 1
        expected_k = mul(self.k_to_b_ratio, self.collateral)
        if abs(self.l2_bound - expected_k) > rounding:
            problems.append(f"k {self.l2_bound} != k_to_b_ratio * b {expected_k}")

        norm = l2_norm(self.curve, ZERO_CURVE)
        if abs(norm - self.l2_bound) > mul(self.l2_bound, l2_tolerance):
            problems.append(f"curve norm {norm} != k {self.l2_bound}")

        if self.curve.sigma < self.min_sigma:
            problems.append(f"sigma {self.curve.sigma} below min_sigma {self.min_sigma}")

        if sum(self.shares.values()) != self.total_shares:
            problems.append(f"share ledger sum != total_shares {self.total_shares}")

        if backing_required(self.curve) > self.collateral:
            problems.append(f"curve peak exceeds collateral {self.collateral}")

        if self.paid_out > self.collateral:
            problems.append(f"paid out {self.paid_out} exceeds collateral {self.collateral}")

        return problems
