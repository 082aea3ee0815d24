"""Weight validation and scheduled weight interpolation."""

from __future__ import annotations

from collections.abc import Sequence

from weighted_pool.constants import WEIGHT_TOLERANCE
from weighted_pool.math.fixed_point import SCALE

from .errors import InvalidAmountError, InvalidWeightsError
from .state import PoolState, WeightSchedule


def validate_weights(
    weights: Sequence[int],
    asset_count: int,
    *,
    tolerance: int = WEIGHT_TOLERANCE,
) -> None:
    """Check a weight vector for a pool with asset_count assets.

    Raises:
        InvalidWeightsError: If the length is wrong, a weight is not positive,
            or the sum is more than tolerance away from SCALE
    """
    if len(weights) != asset_count:
        raise InvalidWeightsError(f"Expected {asset_count} weights, got {len(weights)}")
    if any(w <= 0 for w in weights):
        raise InvalidWeightsError("Every weight must be positive")
    total = sum(weights)
    if abs(total - SCALE) > tolerance:
        raise InvalidWeightsError(f"Weights sum to {total}, expected {SCALE}")


def new_schedule(now: int, duration: int, target_weights: Sequence[int]) -> WeightSchedule:
    """Build a schedule reaching target_weights duration seconds from now."""
    if duration < 0:
        raise InvalidAmountError(f"Duration must be non-negative, got {duration}")
    return WeightSchedule(
        start_time=now,
        end_time=now + duration,
        target_weights=tuple(target_weights),
    )


def interpolate_weight(
    start_weight: int,
    schedule: WeightSchedule | None,
    index: int,
    now: int,
) -> int:
    """Evaluate one asset's weight at time now.

    - No schedule, or now <= start_time: the stored weight
    - now >= end_time: the target weight
    - otherwise: linear interpolation, offset rounded down toward the start
    """
    if schedule is None or schedule.finalized or now <= schedule.start_time:
        return start_weight

    target = schedule.target_weights[index]
    if now >= schedule.end_time:
        return target

    elapsed = now - schedule.start_time
    delta = abs(target - start_weight)
    offset = (delta * elapsed) // schedule.duration

    if target > start_weight:
        return start_weight + offset
    return start_weight - offset


def effective_weights(state: PoolState, now: int) -> list[int]:
    """Current weight of every asset in the pool."""
    return [
        interpolate_weight(weight, state.schedule, i, now) for i, weight in enumerate(state.weights)
    ]


def rebalance_weights(weights: Sequence[int], total: int = SCALE) -> list[int]:
    """Shift the rounding remainder onto the largest weight so the sum is total.

    Interpolated weights are rounded one by one, so their sum can drift by up
    to len(weights) - 1 units.
    """
    rebalanced = list(weights)
    if not rebalanced:
        return rebalanced
    largest = max(range(len(rebalanced)), key=rebalanced.__getitem__)
    rebalanced[largest] += total - sum(rebalanced)
    return rebalanced


def schedule_complete(schedule: WeightSchedule | None, now: int) -> bool:
    """True once a schedule's target weights are in effect."""
    if schedule is None or schedule.finalized:
        return False
    return now >= schedule.end_time and now > schedule.start_time
