"""Protocol constants for weighted pools.

Centralizes the fixed-point unit, fee and share-token parameters.
"""

from weighted_pool.math.fixed_point import SCALE
from weighted_pool.safe_int import UINT64_MAX

# Swap fee in SCALE units: 1_000 / 1_000_000 = 0.1%
SWAP_FEE = 1_000

# Shares minted for the first-ever deposit into a pool, whatever was deposited
AMOUNT_LP_DEPLOYER = 1_000_000

# Total supply of every share token; the pool holds it all at bootstrap
SHARE_TOTAL_SUPPLY = UINT64_MAX

# Rounding slack allowed when checking that weights sum to SCALE
WEIGHT_TOLERANCE = 1

MIN_POOL_ASSETS = 2

__all__ = [
    "SCALE",
    "SWAP_FEE",
    "AMOUNT_LP_DEPLOYER",
    "SHARE_TOTAL_SUPPLY",
    "WEIGHT_TOLERANCE",
    "MIN_POOL_ASSETS",
]
