"""Request and response models for the pool HTTP API."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, Field

from weighted_pool.pool.engine import WeightedPool

NonNegativeInt = Annotated[int, Field(ge=0)]


class PoolRequest(BaseModel):
    """A pool configuration, used to create or look up a pool."""

    asset_ids: list[NonNegativeInt] = Field(alias="assetIds", description="Ordered asset ids.")
    weights: list[NonNegativeInt] = Field(description="Weight per asset, summing to 1_000_000.")

    model_config = {"populate_by_name": True}


class PoolInfo(BaseModel):
    """Public view of one pool."""

    pool_id: int = Field(alias="poolId")
    pool_hash: str = Field(alias="poolHash")
    assets: list[int]
    weights: list[int] = Field(description="Weights in effect right now.")
    balances: list[int]
    share_token: int = Field(alias="shareToken")
    circulating_supply: int = Field(alias="circulatingSupply")
    start_time: int = Field(alias="startTime", description="Start of the latest weight change.")
    end_time: int = Field(alias="endTime", description="End of the latest weight change.")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_pool(cls, pool: WeightedPool, pool_hash: str) -> PoolInfo:
        start_time, end_time, _now = pool.get_times()
        return cls(
            pool_id=pool.pool_id,
            pool_hash=pool_hash,
            assets=list(pool.state.assets),
            weights=pool.get_current_weights(),
            balances=list(pool.state.balances),
            share_token=pool.get_token(),
            circulating_supply=pool.circulating_supply,
            start_time=start_time,
            end_time=end_time,
        )


class OperationResponse(BaseModel):
    """Result of an operation run against a pool."""

    operation: str
    result: Any = None


class ErrorResponse(BaseModel):
    """Body returned when the pool rejects an operation."""

    detail: str
    error: str = Field(description="Name of the error class.")
