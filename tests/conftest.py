"""Pytest configuration and fixtures."""

import pytest

from tests.helpers.constants import ASSET_A, ASSET_B, HALF, T0
from tests.helpers.factories import FakeClock, make_funded_pool, make_pool
from weighted_pool.pool import InMemoryLedger, WeightedPool
from weighted_pool.registry import PoolRegistry


@pytest.fixture
def clock() -> FakeClock:
    """Manually advanced clock starting at T0."""
    return FakeClock(T0)


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def pool(clock: FakeClock, ledger: InMemoryLedger) -> WeightedPool:
    """Bootstrapped 50/50 pool with no liquidity."""
    return make_pool((ASSET_A, ASSET_B), (HALF, HALF), clock=clock, ledger=ledger)


@pytest.fixture
def funded_pool(clock: FakeClock, ledger: InMemoryLedger) -> WeightedPool:
    """50/50 pool holding 10,000,000 of each asset."""
    return make_funded_pool(
        (ASSET_A, ASSET_B),
        (HALF, HALF),
        (10_000_000, 10_000_000),
        clock=clock,
        ledger=ledger,
    )


@pytest.fixture
def registry(clock: FakeClock, ledger: InMemoryLedger) -> PoolRegistry:
    return PoolRegistry(ledger=ledger, clock=clock)
