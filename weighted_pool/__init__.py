"""Weighted multi-asset liquidity pools."""

from weighted_pool.pool import WeightedPool
from weighted_pool.registry import PoolRegistry

__version__ = "0.1.0"
__all__ = ["PoolRegistry", "WeightedPool", "__version__"]
