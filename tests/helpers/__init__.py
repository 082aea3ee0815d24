"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Asset ids, depositors, weights and times
- factories: FakeClock and pool factory functions
"""

from tests.helpers.constants import (
    ALICE,
    ASSET_A,
    ASSET_B,
    ASSET_C,
    ASSET_D,
    BOB,
    CAROL,
    DAVE,
    EIGHTY,
    FIRST_SHARE_TOKEN,
    HALF,
    T0,
    THIRDS,
    TWENTY,
)
from tests.helpers.factories import FakeClock, deposit_all, make_funded_pool, make_pool

__all__ = [
    # Constants
    "ASSET_A",
    "ASSET_B",
    "ASSET_C",
    "ASSET_D",
    "ALICE",
    "BOB",
    "CAROL",
    "DAVE",
    "HALF",
    "EIGHTY",
    "TWENTY",
    "THIRDS",
    "T0",
    "FIRST_SHARE_TOKEN",
    # Factories
    "FakeClock",
    "make_pool",
    "make_funded_pool",
    "deposit_all",
]
