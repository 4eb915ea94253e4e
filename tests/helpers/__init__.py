"""Test helpers module for shared test utilities.

- constants: accounts and the reference pool parameters
- factories: curve and engine factory functions
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    ONE,
    SCENARIO_B,
    SCENARIO_K,
    SCENARIO_MIN_SIGMA,
    SCENARIO_RATIO,
    STARTING_BALANCE,
)
from tests.helpers.factories import (
    curve_for_bound,
    initialize_scenario,
    make_curve,
    make_engine,
)

__all__ = [
    # Constants
    "ONE",
    "ALICE",
    "BOB",
    "CAROL",
    "SCENARIO_K",
    "SCENARIO_B",
    "SCENARIO_RATIO",
    "SCENARIO_MIN_SIGMA",
    "STARTING_BALANCE",
    # Factories
    "make_curve",
    "curve_for_bound",
    "make_engine",
    "initialize_scenario",
]
