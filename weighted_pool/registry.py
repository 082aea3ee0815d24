"""Pool registry for creating and finding weighted pools.

Pools are identified two ways:
- by pool id, allocated sequentially on creation
- by pool hash, a digest over the (asset, weight) pairs, so that one
  configuration maps to at most one pool
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator, Sequence

import structlog

from weighted_pool.config import DEFAULT_POOL_CONFIG, PoolConfig
from weighted_pool.pool.engine import Clock, WeightedPool
from weighted_pool.pool.errors import (
    InvalidAssetsError,
    InvalidWeightsError,
    PoolExistsError,
    PoolNotFoundError,
)
from weighted_pool.pool.ledger import AssetLedger, InMemoryLedger
from weighted_pool.safe_int import UINT64_MAX

logger = structlog.get_logger()


def pool_hash(asset_ids: Sequence[int], weights: Sequence[int]) -> str:
    """Digest identifying a pool configuration.

    The (asset, weight) pairs are sorted by asset id, so the hash does not
    depend on the order assets were listed in. Each pair is encoded as two
    8-byte big-endian integers.

    Raises:
        InvalidAssetsError: If the lengths differ or an asset id is not a uint64
        InvalidWeightsError: If a weight is not a uint64
    """
    if len(asset_ids) != len(weights):
        raise InvalidAssetsError("Weights and assets length must be the same")

    digest = hashlib.sha256()
    for asset_id, weight in sorted(zip(asset_ids, weights, strict=True)):
        if not 0 <= asset_id <= UINT64_MAX:
            raise InvalidAssetsError(f"Asset id {asset_id} is not a uint64")
        if not 0 <= weight <= UINT64_MAX:
            raise InvalidWeightsError(f"Weight {weight} is not a uint64")
        digest.update(asset_id.to_bytes(8, "big"))
        digest.update(weight.to_bytes(8, "big"))
    return digest.hexdigest()


class PoolRegistry:
    """Registry of weighted pools sharing one ledger and one clock.

    Args:
        ledger: Ledger every pool pays out through. Defaults to a new InMemoryLedger.
        clock: Clock every pool reads. Defaults to the engine's unix clock.
        config: Settings applied to every pool created by this registry.
    """

    def __init__(
        self,
        ledger: AssetLedger | None = None,
        clock: Clock | None = None,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        self.ledger: AssetLedger = ledger if ledger is not None else InMemoryLedger()
        self.clock = clock
        self.config = config
        self._pools: dict[int, WeightedPool] = {}
        self._by_hash: dict[str, int] = {}
        self._hash_by_id: dict[int, str] = {}
        self._next_pool_id = 1

    def create_pool(self, asset_ids: Sequence[int], weights: Sequence[int]) -> WeightedPool:
        """Create and bootstrap a pool.

        Nothing is registered if bootstrapping fails.

        Raises:
            PoolExistsError: If a pool with the same configuration exists
            PoolError: If the assets or weights are invalid
        """
        key = pool_hash(asset_ids, weights)
        if key in self._by_hash:
            raise PoolExistsError(f"Pool {self._by_hash[key]} already has this configuration")

        pool = WeightedPool(
            self._next_pool_id,
            ledger=self.ledger,
            clock=self.clock,
            config=self.config,
        )
        pool.bootstrap(asset_ids, weights)

        self._pools[pool.pool_id] = pool
        self._by_hash[key] = pool.pool_id
        self._hash_by_id[pool.pool_id] = key
        self._next_pool_id += 1
        logger.debug("pool_registered", pool_id=pool.pool_id, pool_hash=key)
        return pool

    def get_pool(self, asset_ids: Sequence[int], weights: Sequence[int]) -> WeightedPool | None:
        """Find the pool for a configuration, or None if there is none."""
        pool_id = self._by_hash.get(pool_hash(asset_ids, weights))
        if pool_id is None:
            return None
        return self._pools[pool_id]

    def get_by_id(self, pool_id: int) -> WeightedPool:
        """Get a pool by id.

        Raises:
            PoolNotFoundError: If no pool has this id
        """
        pool = self._pools.get(pool_id)
        if pool is None:
            raise PoolNotFoundError(f"No pool with id {pool_id}")
        return pool

    def get_hash(self, pool_id: int) -> str:
        """Configuration hash a pool was registered under."""
        self.get_by_id(pool_id)
        return self._hash_by_id[pool_id]

    def __len__(self) -> int:
        return len(self._pools)

    def __iter__(self) -> Iterator[WeightedPool]:
        return iter(self._pools.values())
