"""Tests for PoolRegistry and the pool hash."""

import hashlib

import pytest

from tests.helpers import ASSET_A, ASSET_B, ASSET_C, EIGHTY, FIRST_SHARE_TOKEN, HALF, THIRDS, TWENTY
from weighted_pool.pool import (
    InvalidAssetsError,
    InvalidWeightsError,
    PoolExistsError,
    PoolNotFoundError,
)
from weighted_pool.registry import PoolRegistry, pool_hash


class TestPoolHash:
    """Tests for pool_hash."""

    def test_is_hex_sha256(self):
        digest = pool_hash([ASSET_A, ASSET_B], [HALF, HALF])
        assert len(digest) == 64
        int(digest, 16)

    def test_order_insensitive(self):
        assert pool_hash([ASSET_A, ASSET_B], [EIGHTY, TWENTY]) == pool_hash(
            [ASSET_B, ASSET_A], [TWENTY, EIGHTY]
        )

    def test_weights_are_bound_to_assets(self):
        assert pool_hash([ASSET_A, ASSET_B], [EIGHTY, TWENTY]) != pool_hash(
            [ASSET_A, ASSET_B], [TWENTY, EIGHTY]
        )

    def test_known_encoding(self):
        """Pairs are two 8-byte big-endian integers, sorted by asset id."""
        # ASSET_C sorts before ASSET_B
        payload = b"".join(n.to_bytes(8, "big") for n in (ASSET_C, EIGHTY, ASSET_B, TWENTY))
        expected = hashlib.sha256(payload).hexdigest()
        assert pool_hash([ASSET_B, ASSET_C], [TWENTY, EIGHTY]) == expected

    def test_length_mismatch(self):
        with pytest.raises(InvalidAssetsError):
            pool_hash([ASSET_A, ASSET_B], [HALF])

    def test_out_of_range_asset(self):
        with pytest.raises(InvalidAssetsError):
            pool_hash([2**64, ASSET_B], [HALF, HALF])

    def test_negative_weight(self):
        with pytest.raises(InvalidWeightsError):
            pool_hash([ASSET_A, ASSET_B], [-1, HALF])


class TestPoolRegistry:
    """Tests for PoolRegistry."""

    def test_create_pool(self, registry, ledger):
        pool = registry.create_pool([ASSET_A, ASSET_B], [HALF, HALF])

        assert pool.pool_id == 1
        assert pool.get_token() == FIRST_SHARE_TOKEN
        assert pool.ledger is ledger
        assert len(registry) == 1

    def test_ids_are_sequential(self, registry):
        first = registry.create_pool([ASSET_A, ASSET_B], [HALF, HALF])
        second = registry.create_pool([ASSET_A, ASSET_B, ASSET_C], list(THIRDS))
        assert (first.pool_id, second.pool_id) == (1, 2)
        assert list(registry) == [first, second]

    def test_pools_share_the_clock(self, registry, clock):
        pool = registry.create_pool([ASSET_A, ASSET_B], [HALF, HALF])
        clock.advance(42)
        assert pool.get_times()[2] == clock.now

    def test_duplicate_rejected(self, registry):
        registry.create_pool([ASSET_A, ASSET_B], [EIGHTY, TWENTY])
        with pytest.raises(PoolExistsError):
            registry.create_pool([ASSET_B, ASSET_A], [TWENTY, EIGHTY])
        assert len(registry) == 1

    def test_same_assets_other_weights_allowed(self, registry):
        registry.create_pool([ASSET_A, ASSET_B], [EIGHTY, TWENTY])
        registry.create_pool([ASSET_A, ASSET_B], [HALF, HALF])
        assert len(registry) == 2

    def test_invalid_pool_not_registered(self, registry, ledger):
        with pytest.raises(InvalidWeightsError):
            registry.create_pool([ASSET_A, ASSET_B], [HALF, HALF + 10])
        with pytest.raises(InvalidAssetsError):
            registry.create_pool([ASSET_A, ASSET_A], [HALF, HALF])

        assert len(registry) == 0
        assert ledger.share_tokens == {}
        # The next pool still gets id 1
        assert registry.create_pool([ASSET_A, ASSET_B], [HALF, HALF]).pool_id == 1

    def test_get_pool(self, registry):
        pool = registry.create_pool([ASSET_A, ASSET_B], [EIGHTY, TWENTY])
        assert registry.get_pool([ASSET_B, ASSET_A], [TWENTY, EIGHTY]) is pool
        assert registry.get_pool([ASSET_A, ASSET_B], [HALF, HALF]) is None

    def test_get_by_id(self, registry):
        pool = registry.create_pool([ASSET_A, ASSET_B], [HALF, HALF])
        assert registry.get_by_id(1) is pool
        with pytest.raises(PoolNotFoundError):
            registry.get_by_id(2)

    def test_get_hash(self, registry):
        registry.create_pool([ASSET_A, ASSET_B], [HALF, HALF])
        assert registry.get_hash(1) == pool_hash([ASSET_A, ASSET_B], [HALF, HALF])
        with pytest.raises(PoolNotFoundError):
            registry.get_hash(9)

    def test_default_ledger(self):
        registry = PoolRegistry()
        pool = registry.create_pool([ASSET_A, ASSET_B], [HALF, HALF])
        assert pool.ledger is registry.ledger
