"""Scaled Gaussian curves and their L2 geometry.

A curve is f(x) = lambda * exp(-(x - mu)^2 / (2 * sigma^2)). All values are
18-decimal fixed-point integers and every formula goes through
distmarket.math.fixed_point, so results are deterministic across platforms.

L2 geometry:
    self term   S(f)    = lambda^2 / (2 * sigma * sqrt(2 pi))
    cross term  C(f, g) = lambda_f * lambda_g / sqrt(pi * s) * exp(-dmu^2 / (2 s)),
                          s = sigma_f^2 + sigma_g^2
    distance^2          = S(f) + S(g) - C(f, g)

This is the squared L2 distance between lambda-weighted normal densities,
scaled by 1/sqrt(2). It is symmetric, non-negative and zero exactly when the
two curves coincide.
"""

from __future__ import annotations

from dataclasses import dataclass

from distmarket.constants import MAX_STANDARD_SCORE, SQRT_2PI, SQRT_PI
from distmarket.errors import InvalidParameters
from distmarket.math.fixed_point import (
    MIN_NATURAL_EXPONENT,
    add,
    div,
    exp,
    mul,
    mul_div,
    sqrt,
    sub,
)

__all__ = [
    "GaussianCurve",
    "ZERO_CURVE",
    "evaluate",
    "difference",
    "max_value",
    "self_term",
    "cross_term",
    "l2_norm_squared",
    "l2_norm",
    "scale_for_norm",
]


@dataclass(frozen=True)
class GaussianCurve:
    """Scaled Gaussian curve.

    Attributes:
        mu: Mean (signed fixed-point)
        sigma: Standard deviation (unsigned fixed-point). Zero means the curve
            is degenerate and identically zero.
        lam: Scale factor lambda (unsigned fixed-point), the curve's peak value
    """

    mu: int
    sigma: int
    lam: int

    def __post_init__(self) -> None:
        for name in ("mu", "sigma", "lam"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidParameters(f"{name} must be int, got {type(value).__name__}")
        if self.sigma < 0:
            raise InvalidParameters(f"sigma must be non-negative, got {self.sigma}")
        if self.lam < 0:
            raise InvalidParameters(f"lambda must be non-negative, got {self.lam}")

    @property
    def is_degenerate(self) -> bool:
        """True if the curve is identically zero."""
        return self.sigma == 0 or self.lam == 0

    def scaled(self, numerator: int, denominator: int) -> GaussianCurve:
        """Return the curve with lambda pro-rated by numerator / denominator."""
        return GaussianCurve(self.mu, self.sigma, mul_div(self.lam, numerator, denominator))


ZERO_CURVE = GaussianCurve(mu=0, sigma=0, lam=0)


def _gaussian_weight(distance: int, width: int) -> int:
    """exp(-(distance / width)^2 / 2), or 0 once it is below fixed-point resolution."""
    z = div(distance, width)
    if abs(z) > MAX_STANDARD_SCORE:
        return 0
    exponent = -(mul(z, z) // 2)
    if exponent < MIN_NATURAL_EXPONENT:
        return 0
    return exp(exponent)


def evaluate(curve: GaussianCurve, x: int) -> int:
    """Evaluate the curve at x.

    Returns 0 for degenerate curves (sigma == 0 or lambda == 0).
    """
    if curve.is_degenerate:
        return 0
    return mul(curve.lam, _gaussian_weight(sub(x, curve.mu), curve.sigma))


def difference(curve_a: GaussianCurve, curve_b: GaussianCurve, x: int) -> int:
    """Signed difference f_a(x) - f_b(x)."""
    return sub(evaluate(curve_a, x), evaluate(curve_b, x))


def max_value(curve: GaussianCurve) -> int:
    """Peak value of the curve, reached at x = mu."""
    return evaluate(curve, curve.mu)


def self_term(curve: GaussianCurve) -> int:
    """lambda^2 / (2 * sigma * sqrt(2 pi))."""
    if curve.is_degenerate:
        return 0
    return div(mul(curve.lam, curve.lam), mul(2 * curve.sigma, SQRT_2PI))


def cross_term(curve_a: GaussianCurve, curve_b: GaussianCurve) -> int:
    """lambda_a * lambda_b / sqrt(pi * s) * exp(-dmu^2 / (2 s)), s = sigma_a^2 + sigma_b^2."""
    if curve_a.is_degenerate or curve_b.is_degenerate:
        return 0

    root_s = sqrt(add(mul(curve_a.sigma, curve_a.sigma), mul(curve_b.sigma, curve_b.sigma)))
    weight = _gaussian_weight(sub(curve_a.mu, curve_b.mu), root_s)
    if weight == 0:
        return 0

    scale = mul(curve_a.lam, curve_b.lam)
    return div(div(mul(scale, weight), SQRT_PI), root_s)


def l2_norm_squared(curve_a: GaussianCurve, curve_b: GaussianCurve) -> int:
    """Squared L2 distance between two curves.

    Clamped to 0 when rounding makes the subtraction negative (curves that are
    numerically indistinguishable). Identical curves are exactly 0.
    """
    if curve_a == curve_b:
        return 0
    total = sub(add(self_term(curve_a), self_term(curve_b)), cross_term(curve_a, curve_b))
    return max(0, total)


def l2_norm(curve_a: GaussianCurve, curve_b: GaussianCurve) -> int:
    """L2 distance between two curves."""
    return sqrt(l2_norm_squared(curve_a, curve_b))


def scale_for_norm(k: int, sigma: int) -> int:
    """Lambda giving a curve of width sigma an L2 self-norm of k.

    Inverts self_term: lambda = k * sqrt(2 * sigma * sqrt(2 pi)).
    """
    if sigma <= 0:
        raise InvalidParameters(f"sigma must be positive, got {sigma}")
    return mul(k, sqrt(mul(2 * sigma, SQRT_2PI)))
