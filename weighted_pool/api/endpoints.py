"""API endpoints for weighted pools."""

from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from weighted_pool.math.fixed_point import LogExpMathError
from weighted_pool.models import ErrorResponse, OperationResponse, PoolInfo, PoolRequest
from weighted_pool.operations import READ_ONLY_OPERATIONS, Operation, dispatch, parse_args
from weighted_pool.pool.errors import PoolError, PoolNotFoundError
from weighted_pool.pool.ledger import LedgerError
from weighted_pool.registry import PoolRegistry
from weighted_pool.safe_int import SafeIntError

logger = structlog.get_logger()

router = APIRouter()

# Errors raised when a pool rejects an operation; reported as 400
REJECTION_ERRORS = (PoolError, LedgerError, LogExpMathError, SafeIntError)

_default_registry = PoolRegistry()


def get_registry() -> PoolRegistry:
    """Dependency provider for the pool registry.

    Override this in tests to inject a registry with a fake clock:
        app.dependency_overrides[get_registry] = lambda: registry

    Returns:
        The registry pools are created in and looked up from.
    """
    return _default_registry


def _error_response(status_code: int, err: Exception) -> JSONResponse:
    body = ErrorResponse(detail=str(err), error=type(err).__name__)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _pool_info(registry: PoolRegistry, pool_id: int) -> PoolInfo:
    try:
        pool = registry.get_by_id(pool_id)
    except PoolNotFoundError as err:
        raise HTTPException(status_code=404, detail=str(err)) from err
    return PoolInfo.from_pool(pool, registry.get_hash(pool_id))


@router.post("/pools", status_code=201, response_model=PoolInfo)
async def create_pool(
    request: PoolRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> Any:
    """Create and bootstrap a pool.

    Returns 400 if the configuration is invalid or already registered.
    """
    try:
        pool = registry.create_pool(request.asset_ids, request.weights)
    except PoolError as err:
        return _error_response(400, err)
    return _pool_info(registry, pool.pool_id)


@router.post("/pools/lookup", response_model=PoolInfo)
async def lookup_pool(
    request: PoolRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> Any:
    """Find the pool registered for a configuration."""
    try:
        pool = registry.get_pool(request.asset_ids, request.weights)
    except PoolError as err:
        return _error_response(400, err)
    if pool is None:
        raise HTTPException(status_code=404, detail="No pool with this configuration")
    return _pool_info(registry, pool.pool_id)


@router.get("/pools/{pool_id}", response_model=PoolInfo)
async def get_pool(
    pool_id: int,
    registry: PoolRegistry = Depends(get_registry),
) -> PoolInfo:
    return _pool_info(registry, pool_id)


@router.post("/pools/{pool_id}/{operation}", response_model=OperationResponse)
async def run_operation(
    pool_id: int,
    operation: str,
    payload: dict[str, Any] | None = Body(default=None),
    registry: PoolRegistry = Depends(get_registry),
) -> Any:
    """Run one pool operation.

    Handlers are async and never await, so operations run one at a time on
    the event loop and each one sees the state left by the previous one.

    Error Handling:
        - Unknown pool or operation: 404
        - Invalid arguments: 422 (Pydantic)
        - Operation rejected by the pool: 400 with the error class name
        - Anything else: logged with traceback, then re-raised (500)
    """
    try:
        op = Operation(operation)
    except ValueError as err:
        raise HTTPException(status_code=404, detail=f"Unknown operation: {operation}") from err

    try:
        pool = registry.get_by_id(pool_id)
    except PoolNotFoundError as err:
        raise HTTPException(status_code=404, detail=str(err)) from err

    try:
        args = parse_args(op, payload)
    except ValidationError as err:
        raise RequestValidationError(err.errors()) from err

    try:
        result = dispatch(pool, op, args)
    except REJECTION_ERRORS as err:
        return _error_response(400, err)
    except Exception:
        logger.exception(
            "operation_error",
            pool_id=pool_id,
            operation=op.value,
        )
        raise

    if op not in READ_ONLY_OPERATIONS:
        logger.debug("operation_applied", pool_id=pool_id, operation=op.value)
    return OperationResponse(operation=op.value, result=result)
