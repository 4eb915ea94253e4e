"""Gaussian curve primitives: evaluation, differences and L2 geometry."""

from distmarket.curves.gaussian import (
    ZERO_CURVE,
    GaussianCurve,
    cross_term,
    difference,
    evaluate,
    l2_norm,
    l2_norm_squared,
    max_value,
    scale_for_norm,
    self_term,
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
