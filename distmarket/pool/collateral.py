"""Collateral and fee policy for curve transitions.

A trader moving the market from old_curve to new_curve holds the position
new_curve - old_curve. Its worst case is at the critical point, the x-value
where that difference is most negative. The engine takes the critical point
from the caller; find_critical_point() is a search helper callers may use to
compute it.
"""

from __future__ import annotations

import structlog
from scipy.optimize import minimize

from distmarket.constants import DEFAULT_FEE_RATE, ONE_18
from distmarket.curves.gaussian import GaussianCurve, difference, l2_norm, max_value
from distmarket.math.fixed_point import mul

logger = structlog.get_logger()

__all__ = [
    "backing_required",
    "required_collateral",
    "trade_fee",
    "find_critical_point",
]


def backing_required(curve: GaussianCurve) -> int:
    """Worst-case backing a curve needs: its peak value."""
    return max_value(curve)


def required_collateral(
    old_curve: GaussianCurve,
    new_curve: GaussianCurve,
    critical_point: int,
) -> int:
    """Maximum loss of the position new_curve - old_curve.

    Evaluated exactly (no linear approximation of exp) at the supplied
    critical point: max(0, f_old(x) - f_new(x)).
    """
    loss = difference(old_curve, new_curve, critical_point)
    return max(0, loss)


def trade_fee(
    old_curve: GaussianCurve,
    new_curve: GaussianCurve,
    fee_rate: int = DEFAULT_FEE_RATE,
) -> int:
    """Fee proportional to the L2 distance of the curve change.

    Identical curves have distance exactly 0, so no change means no fee.
    """
    return mul(l2_norm(old_curve, new_curve), fee_rate)


def find_critical_point(old_curve: GaussianCurve, new_curve: GaussianCurve) -> int:
    """Search for the x where new_curve - old_curve is most negative.

    Runs Nelder-Mead from both means and keeps the worse minimum. The
    objective is the fixed-point difference itself, so the returned point is
    scored with the same arithmetic the engine uses.

    Returns:
        Critical point as fixed-point int
    """

    def objective(point: list[float]) -> float:
        x = int(point[0] * ONE_18)
        return difference(new_curve, old_curve, x) / ONE_18

    best_x = old_curve.mu
    best_value = difference(new_curve, old_curve, best_x)
    for start in (old_curve.mu, new_curve.mu):
        result = minimize(objective, x0=[start / ONE_18], method="Nelder-Mead")
        x = int(float(result.x[0]) * ONE_18)
        value = difference(new_curve, old_curve, x)
        if value < best_value:
            best_x, best_value = x, value

    logger.debug(
        "critical_point_found",
        critical_point=best_x,
        difference=best_value,
    )
    return best_x
