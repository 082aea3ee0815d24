"""Operation dispatch table for weighted pools.

Every public pool operation has an entry in Operation, a typed argument
model and a handler calling the engine. Callers (the HTTP API, tests, any
other host) go through dispatch() so arguments are validated the same way
everywhere.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, Field

from weighted_pool.pool.engine import WeightedPool

NonNegativeInt = Annotated[int, Field(ge=0)]
Depositor = Annotated[str, Field(min_length=1)]


class Operation(str, Enum):
    """Public operations of a pool, by wire name."""

    BOOTSTRAP = "bootstrap"
    ADD_LIQUIDITY = "addLiquidity"
    GET_LIQUIDITY = "getLiquidity"
    BURN_LIQUIDITY = "burnLiquidity"
    SWAP = "swap"
    CHANGE_WEIGHTS = "changeWeights"
    GET_CURRENT_WEIGHT = "getCurrentWeight"
    GET_BALANCE = "getBalance"
    GET_TOTAL_ASSETS = "getTotalAssets"
    ESTIMATE_SWAP = "estimateSwap"
    GET_TOKEN = "getToken"
    GET_TIMES = "getTimes"


# =============================================================================
# Argument models
# =============================================================================


class BootstrapArgs(BaseModel):
    """Assets and weights fixed for the pool's lifetime."""

    asset_ids: list[NonNegativeInt] = Field(alias="assetIds")
    weights: list[NonNegativeInt]

    model_config = {"populate_by_name": True}


class AddLiquidityArgs(BaseModel):
    asset_index: NonNegativeInt = Field(alias="assetIndex")
    amount: NonNegativeInt
    depositor: Depositor

    model_config = {"populate_by_name": True}


class GetLiquidityArgs(BaseModel):
    depositor: Depositor


class BurnLiquidityArgs(BaseModel):
    depositor: Depositor
    share_amount: NonNegativeInt = Field(alias="shareAmount")

    model_config = {"populate_by_name": True}


class SwapArgs(BaseModel):
    depositor: Depositor
    from_index: NonNegativeInt = Field(alias="fromIndex")
    to_index: NonNegativeInt = Field(alias="toIndex")
    amount_in: NonNegativeInt = Field(alias="amountIn")

    model_config = {"populate_by_name": True}


class ChangeWeightsArgs(BaseModel):
    """New target weights, reached duration seconds from now."""

    duration: NonNegativeInt
    new_weights: list[NonNegativeInt] = Field(alias="newWeights")

    model_config = {"populate_by_name": True}


class AssetIndexArgs(BaseModel):
    asset_index: NonNegativeInt = Field(alias="assetIndex")

    model_config = {"populate_by_name": True}


class EstimateSwapArgs(BaseModel):
    from_index: NonNegativeInt = Field(alias="fromIndex")
    to_index: NonNegativeInt = Field(alias="toIndex")
    amount_in: NonNegativeInt = Field(alias="amountIn")

    model_config = {"populate_by_name": True}


class NoArgs(BaseModel):
    pass


# =============================================================================
# Dispatch table
# =============================================================================


@dataclass(frozen=True)
class OperationEntry:
    """How to validate and run one operation.

    Attributes:
        args_model: Pydantic model the payload is validated into
        handler: Calls the engine with the validated arguments
        read_only: True if the operation never mutates pool state
    """

    args_model: type[BaseModel]
    handler: Callable[[WeightedPool, Any], Any]
    read_only: bool = False


OPERATIONS: dict[Operation, OperationEntry] = {
    Operation.BOOTSTRAP: OperationEntry(
        BootstrapArgs,
        lambda pool, args: pool.bootstrap(args.asset_ids, args.weights),
    ),
    Operation.ADD_LIQUIDITY: OperationEntry(
        AddLiquidityArgs,
        lambda pool, args: pool.add_liquidity(args.asset_index, args.amount, args.depositor),
    ),
    Operation.GET_LIQUIDITY: OperationEntry(
        GetLiquidityArgs,
        lambda pool, args: pool.get_liquidity(args.depositor),
    ),
    Operation.BURN_LIQUIDITY: OperationEntry(
        BurnLiquidityArgs,
        lambda pool, args: pool.burn_liquidity(args.depositor, args.share_amount),
    ),
    Operation.SWAP: OperationEntry(
        SwapArgs,
        lambda pool, args: pool.swap(
            args.depositor, args.from_index, args.to_index, args.amount_in
        ),
    ),
    Operation.CHANGE_WEIGHTS: OperationEntry(
        ChangeWeightsArgs,
        lambda pool, args: pool.change_weights(args.duration, args.new_weights),
    ),
    Operation.GET_CURRENT_WEIGHT: OperationEntry(
        AssetIndexArgs,
        lambda pool, args: pool.get_current_weight(args.asset_index),
        read_only=True,
    ),
    Operation.GET_BALANCE: OperationEntry(
        AssetIndexArgs,
        lambda pool, args: pool.get_balance(args.asset_index),
        read_only=True,
    ),
    Operation.GET_TOTAL_ASSETS: OperationEntry(
        NoArgs,
        lambda pool, _args: pool.get_total_assets(),
        read_only=True,
    ),
    Operation.ESTIMATE_SWAP: OperationEntry(
        EstimateSwapArgs,
        lambda pool, args: pool.estimate_swap(args.from_index, args.to_index, args.amount_in),
        read_only=True,
    ),
    Operation.GET_TOKEN: OperationEntry(
        NoArgs,
        lambda pool, _args: pool.get_token(),
        read_only=True,
    ),
    Operation.GET_TIMES: OperationEntry(
        NoArgs,
        lambda pool, _args: list(pool.get_times()),
        read_only=True,
    ),
}

READ_ONLY_OPERATIONS = frozenset(op for op, entry in OPERATIONS.items() if entry.read_only)


def parse_args(operation: Operation | str, payload: Mapping[str, Any] | None) -> BaseModel:
    """Validate a raw payload into the operation's argument model.

    Raises:
        ValueError: If operation is not a known operation name
        pydantic.ValidationError: If the payload does not match the model
    """
    entry = OPERATIONS[Operation(operation)]
    return entry.args_model.model_validate(payload or {})


def dispatch(
    pool: WeightedPool,
    operation: Operation | str,
    payload: Mapping[str, Any] | BaseModel | None = None,
) -> Any:
    """Validate arguments and run an operation against a pool.

    Args:
        pool: Target pool
        operation: Operation (or its wire name)
        payload: Raw arguments, or an already validated argument model

    Returns:
        Whatever the engine operation returns

    Raises:
        ValueError: If operation is not a known operation name
        pydantic.ValidationError: If the payload is invalid
        PoolError: If the engine rejects the operation
    """
    op = Operation(operation)
    entry = OPERATIONS[op]
    if isinstance(payload, BaseModel):
        if not isinstance(payload, entry.args_model):
            raise TypeError(
                f"{op.value} expects {entry.args_model.__name__}, got {type(payload).__name__}"
            )
        args = payload
    else:
        args = parse_args(op, payload)
    return entry.handler(pool, args)
