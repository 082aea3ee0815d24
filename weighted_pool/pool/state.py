"""Pool state dataclasses.

The persisted record of one pool plus the per-depositor contribution book.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field


@dataclass(frozen=True)
class WeightSchedule:
    """A linear weight transition in flight.

    Attributes:
        start_time: When the transition starts (seconds)
        end_time: When the target weights are reached (seconds)
        target_weights: Weights at end_time, one per pool asset
        finalized: True once target_weights were copied into the static weights
    """

    start_time: int
    end_time: int
    target_weights: tuple[int, ...]
    finalized: bool = False

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class PoolState:
    """Mutable state of one weighted pool.

    Attributes:
        pool_id: Identity of the pool (allocated by the registry)
        assets: Ordered asset ids, fixed at bootstrap
        weights: Static weight per asset (SCALE fixed-point)
        balances: Reserve balance per asset, in native units
        share_token: Share token id, None until bootstrap
        share_total_issued: Total supply of the share token
        share_reserve: Shares still held by the pool (never minted)
        burned: Running total of shares burned
        schedule: Weight transition in flight, if any
        contributions: Per-depositor amounts deposited since their last mint
    """

    pool_id: int
    assets: list[int] = field(default_factory=list)
    weights: list[int] = field(default_factory=list)
    balances: list[int] = field(default_factory=list)
    share_token: int | None = None
    share_total_issued: int = 0
    share_reserve: int = 0
    burned: int = 0
    schedule: WeightSchedule | None = None
    contributions: dict[str, list[int]] = field(default_factory=dict)

    @property
    def bootstrapped(self) -> bool:
        return self.share_token is not None

    @property
    def total_assets(self) -> int:
        return len(self.assets)

    @property
    def circulating_supply(self) -> int:
        """Shares held outside the pool and not yet burned."""
        return self.share_total_issued - self.share_reserve - self.burned

    def contribution(self, depositor: str) -> tuple[int, ...]:
        """Get a depositor's contribution vector without creating it."""
        vector = self.contributions.get(depositor)
        if vector is None:
            return (0,) * self.total_assets
        return tuple(vector)

    def contribution_for_update(self, depositor: str) -> list[int]:
        """Get a depositor's contribution vector, creating it on first use."""
        vector = self.contributions.get(depositor)
        if vector is None:
            vector = [0] * self.total_assets
            self.contributions[depositor] = vector
        return vector

    def reset_contribution(self, depositor: str) -> None:
        self.contributions[depositor] = [0] * self.total_assets

    def snapshot(self) -> PoolState:
        """Deep copy of the state, used to roll back a failed operation."""
        return copy.deepcopy(self)

    def restore(self, snapshot: PoolState) -> None:
        """Overwrite every field with the values from a snapshot."""
        self.__dict__.update(copy.deepcopy(snapshot).__dict__)
