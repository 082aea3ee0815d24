"""Weighted multi-asset pool engine.

This package provides the pool state, its pricing and share math, the weight
scheduler and the WeightedPool operation surface.
"""

# Engine
from .engine import WeightedPool, unix_time

# Errors
from .errors import (
    InsufficientSharesError,
    InvalidAmountError,
    InvalidAssetIndexError,
    InvalidAssetsError,
    InvalidWeightsError,
    MissingContributionError,
    PoolAlreadyBootstrappedError,
    PoolError,
    PoolExistsError,
    PoolNotBootstrappedError,
    PoolNotFoundError,
    ZeroBalanceError,
    ZeroWeightError,
)

# Ledger collaborator
from .ledger import (
    AssetLedger,
    Collection,
    InMemoryLedger,
    InsufficientBalanceError,
    LedgerError,
    Settlement,
    Transfer,
)

# Share math
from .liquidity import calc_burn_payouts, calc_shares_minted

# State
from .state import PoolState, WeightSchedule

# Swap math
from .swap_math import calc_out

# Weight scheduling
from .weights import effective_weights, interpolate_weight, rebalance_weights, validate_weights

__all__ = [
    # Engine
    "WeightedPool",
    "unix_time",
    # State
    "PoolState",
    "WeightSchedule",
    # Ledger
    "AssetLedger",
    "InMemoryLedger",
    "Settlement",
    "Collection",
    "Transfer",
    # Math
    "calc_out",
    "calc_shares_minted",
    "calc_burn_payouts",
    # Weights
    "validate_weights",
    "interpolate_weight",
    "effective_weights",
    "rebalance_weights",
    # Errors
    "PoolError",
    "PoolNotBootstrappedError",
    "PoolAlreadyBootstrappedError",
    "InvalidAssetsError",
    "InvalidWeightsError",
    "InvalidAssetIndexError",
    "InvalidAmountError",
    "ZeroBalanceError",
    "ZeroWeightError",
    "MissingContributionError",
    "InsufficientSharesError",
    "PoolExistsError",
    "PoolNotFoundError",
    "LedgerError",
    "InsufficientBalanceError",
]
