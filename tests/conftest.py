"""Pytest configuration and fixtures."""

import pytest

from distmarket.curves.gaussian import GaussianCurve
from distmarket.pool.engine import PoolEngine
from distmarket.pool.memory import InMemoryCollateralLedger, InMemoryPositionRegistry
from tests.helpers import make_curve, make_engine


@pytest.fixture
def unit_curve() -> GaussianCurve:
    """Unit curve: mu = 0, sigma = 1, lambda = 1."""
    return make_curve()


@pytest.fixture
def registry() -> InMemoryPositionRegistry:
    return InMemoryPositionRegistry()


@pytest.fixture
def ledger() -> InMemoryCollateralLedger:
    """Ledger with every test account funded."""
    _, _, funded = make_engine()
    return funded


@pytest.fixture
def engine(registry, ledger) -> PoolEngine:
    """Uninitialized engine wired to the registry and ledger fixtures."""
    pool, _, _ = make_engine(registry=registry, ledger=ledger)
    return pool


@pytest.fixture
def active_engine(registry, ledger) -> PoolEngine:
    """Engine initialized by ALICE with the reference scenario."""
    pool, _, _ = make_engine(initialized=True, registry=registry, ledger=ledger)
    return pool
