"""Weighted pool engine.

WeightedPool is the public operation surface of one pool. Every mutating
operation runs inside a transaction: the pool state is snapshotted first,
restored if anything raises, and the queued ledger settlement is only applied
once the operation has succeeded. Read-only queries never touch the state.
"""

from __future__ import annotations

import dataclasses
import time
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager

import structlog

from weighted_pool.config import DEFAULT_POOL_CONFIG, PoolConfig
from weighted_pool.constants import MIN_POOL_ASSETS
from weighted_pool.safe_int import S

from .errors import (
    InsufficientSharesError,
    InvalidAmountError,
    InvalidAssetIndexError,
    InvalidAssetsError,
    PoolAlreadyBootstrappedError,
    PoolNotBootstrappedError,
)
from .ledger import AssetLedger, Collection, InMemoryLedger, Settlement, Transfer
from .liquidity import calc_burn_payouts, calc_shares_minted
from .state import PoolState
from .swap_math import calc_out
from .weights import (
    effective_weights,
    interpolate_weight,
    new_schedule,
    rebalance_weights,
    schedule_complete,
    validate_weights,
)

logger = structlog.get_logger()

Clock = Callable[[], int]


def unix_time() -> int:
    """Default clock: whole seconds since the epoch."""
    return int(time.time())


class WeightedPool:
    """A weighted multi-asset pool.

    Args:
        pool_id: Identity of the pool
        ledger: Ledger used to create the share token, collect burned shares
            and pay out assets.
            If None, a private InMemoryLedger is used.
        clock: Returns the current time in seconds. Defaults to unix_time.
        config: Pool behaviour settings.
    """

    def __init__(
        self,
        pool_id: int,
        *,
        ledger: AssetLedger | None = None,
        clock: Clock | None = None,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        self.state = PoolState(pool_id=pool_id)
        self.ledger: AssetLedger = ledger if ledger is not None else InMemoryLedger()
        self.clock: Clock = clock if clock is not None else unix_time
        self.config = config

    @property
    def pool_id(self) -> int:
        return self.state.pool_id

    # =========================================================================
    # Internals
    # =========================================================================

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Settlement]:
        """Run an operation all-or-nothing.

        Yields a Settlement the operation queues its collections and
        transfers on. It is handed to the ledger in one settle() call, only
        after the operation body completed. The ledger applies it whole or
        not at all, so a ledger rejection leaves both sides untouched.
        """
        snapshot = self.state.snapshot()
        pending = Settlement()
        try:
            yield pending
            if pending:
                self.ledger.settle(pending)
        except Exception as err:
            self.state.restore(snapshot)
            logger.debug(
                "operation_rejected",
                pool_id=self.pool_id,
                operation=operation,
                error_type=type(err).__name__,
                error=str(err),
            )
            raise

    def _require_bootstrapped(self) -> None:
        if not self.state.bootstrapped:
            raise PoolNotBootstrappedError(f"Pool {self.pool_id} is not bootstrapped")

    def _share_token(self) -> int:
        token = self.state.share_token
        if token is None:
            raise PoolNotBootstrappedError(f"Pool {self.pool_id} is not bootstrapped")
        return token

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.state.total_assets:
            raise InvalidAssetIndexError(
                f"Asset index {index} out of range for {self.state.total_assets} assets"
            )

    def _check_pair(self, from_index: int, to_index: int) -> None:
        self._check_index(from_index)
        self._check_index(to_index)
        if from_index == to_index:
            raise InvalidAssetIndexError(f"Cannot swap asset index {from_index} for itself")

    def _pricing_weights(self, now: int) -> list[int]:
        """Weights swaps and mints are priced with at time now."""
        if self.config.price_with_scheduled_weights:
            return effective_weights(self.state, now)
        schedule = self.state.schedule
        if schedule is not None and schedule_complete(schedule, now):
            return list(schedule.target_weights)
        return list(self.state.weights)

    def _settle_schedule(self, now: int) -> None:
        """Copy completed target weights into the static weights."""
        schedule = self.state.schedule
        if schedule is None or not schedule_complete(schedule, now):
            return
        self.state.weights = list(schedule.target_weights)
        self.state.schedule = dataclasses.replace(schedule, finalized=True)
        logger.info(
            "weights_finalized",
            pool_id=self.pool_id,
            weights=self.state.weights,
            end_time=schedule.end_time,
        )

    # =========================================================================
    # Mutating operations
    # =========================================================================

    def bootstrap(self, asset_ids: Sequence[int], weights: Sequence[int]) -> int:
        """Fix the pool's assets and weights and create its share token.

        Args:
            asset_ids: Ordered asset ids (at least two, no duplicates)
            weights: Weight per asset, summing to SCALE

        Returns:
            The share token id

        Raises:
            PoolAlreadyBootstrappedError: If called twice
            InvalidAssetsError: If the asset list is invalid
            InvalidWeightsError: If the weights are invalid
        """
        with self._transaction("bootstrap"):
            if self.state.bootstrapped:
                raise PoolAlreadyBootstrappedError(f"Pool {self.pool_id} is already bootstrapped")
            if len(asset_ids) < MIN_POOL_ASSETS:
                raise InvalidAssetsError(f"At least {MIN_POOL_ASSETS} assets needed")
            if len(set(asset_ids)) != len(asset_ids):
                raise InvalidAssetsError("Duplicate asset ids")
            if len(weights) != len(asset_ids):
                raise InvalidAssetsError("Weights and assets length must be the same")
            validate_weights(weights, len(asset_ids), tolerance=self.config.weight_tolerance)

            total_supply = self.config.share_total_supply
            share_token = self.ledger.create_share_token(self.pool_id, total_supply)

            self.state.assets = list(asset_ids)
            self.state.weights = list(weights)
            self.state.balances = [0] * len(asset_ids)
            self.state.share_token = share_token
            self.state.share_total_issued = total_supply
            self.state.share_reserve = total_supply

        logger.info(
            "pool_bootstrapped",
            pool_id=self.pool_id,
            assets=self.state.assets,
            weights=self.state.weights,
            share_token=share_token,
        )
        return share_token

    def add_liquidity(self, asset_index: int, amount: int, depositor: str) -> None:
        """Record a deposit of one asset by a depositor.

        Shares are not minted here; see get_liquidity.

        Raises:
            PoolNotBootstrappedError: If the pool is not bootstrapped
            InvalidAssetIndexError: If asset_index is out of range
            InvalidAmountError: If amount <= 0
        """
        with self._transaction("add_liquidity"):
            self._require_bootstrapped()
            self._check_index(asset_index)
            if amount <= 0:
                raise InvalidAmountError(f"Deposit amount must be positive, got {amount}")
            self._settle_schedule(self.clock())

            balances = self.state.balances
            balances[asset_index] = (S(balances[asset_index]) + amount).to_uint64()
            vector = self.state.contribution_for_update(depositor)
            vector[asset_index] = (S(vector[asset_index]) + amount).to_uint64()

        logger.info(
            "liquidity_added",
            pool_id=self.pool_id,
            depositor=depositor,
            asset_index=asset_index,
            amount=amount,
        )

    def get_liquidity(self, depositor: str) -> int:
        """Mint shares for a depositor's contributions and send them.

        The depositor's contribution vector is reset to zeros.

        Returns:
            Number of shares minted

        Raises:
            PoolNotBootstrappedError: If the pool is not bootstrapped
            MissingContributionError: If an asset has no contribution
            ZeroBalanceError: If an asset had no balance before the contribution
            InsufficientSharesError: If the pool's share reserve is exhausted
        """
        with self._transaction("get_liquidity") as settlement:
            self._require_bootstrapped()
            now = self.clock()
            self._settle_schedule(now)

            state = self.state
            minted = calc_shares_minted(
                state.balances,
                self._pricing_weights(now),
                state.contribution(depositor),
                state.circulating_supply,
                amount_lp_deployer=self.config.amount_lp_deployer,
            )
            if minted > state.share_reserve:
                raise InsufficientSharesError(
                    f"Cannot mint {minted} shares, reserve holds {state.share_reserve}"
                )

            state.share_reserve = (S(state.share_reserve) - minted).to_uint64()
            state.reset_contribution(depositor)
            if minted > 0:
                settlement.transfers.append(
                    Transfer(self.pool_id, self._share_token(), depositor, minted)
                )

        logger.info(
            "liquidity_minted",
            pool_id=self.pool_id,
            depositor=depositor,
            minted=minted,
            circulating_supply=self.state.circulating_supply,
        )
        return minted

    def burn_liquidity(self, depositor: str, share_amount: int) -> list[int]:
        """Take shares from a depositor and pay them their part of every balance.

        The shares are collected from the depositor in the same settlement
        as the payouts.

        Returns:
            Payout per asset

        Raises:
            PoolNotBootstrappedError: If the pool is not bootstrapped
            InvalidAmountError: If share_amount <= 0
            InsufficientSharesError: If share_amount exceeds the circulating
                supply or the depositor's share holding
        """
        with self._transaction("burn_liquidity") as settlement:
            self._require_bootstrapped()
            self._settle_schedule(self.clock())

            state = self.state
            payouts = calc_burn_payouts(state.balances, share_amount, state.circulating_supply)

            share_token = self._share_token()
            held = self.ledger.balance_of(depositor, share_token)
            if held < share_amount:
                raise InsufficientSharesError(
                    f"{depositor} holds {held} shares, cannot burn {share_amount}"
                )
            settlement.collections.append(
                Collection(self.pool_id, share_token, depositor, share_amount)
            )

            for i, payout in enumerate(payouts):
                state.balances[i] = (S(state.balances[i]) - payout).to_uint64()
                if payout > 0:
                    settlement.transfers.append(
                        Transfer(self.pool_id, state.assets[i], depositor, payout)
                    )
            state.burned = (S(state.burned) + share_amount).to_uint64()

        logger.info(
            "liquidity_burned",
            pool_id=self.pool_id,
            depositor=depositor,
            share_amount=share_amount,
            payouts=payouts,
        )
        return payouts

    def swap(self, depositor: str, from_index: int, to_index: int, amount_in: int) -> int:
        """Exchange amount_in of one asset for another and send the output.

        The full amount_in (fee included) stays in the pool.

        Returns:
            Amount of the output asset sent to the depositor

        Raises:
            PoolNotBootstrappedError: If the pool is not bootstrapped
            InvalidAssetIndexError: If an index is out of range or both are equal
            InvalidAmountError: If amount_in is negative
        """
        with self._transaction("swap") as settlement:
            self._require_bootstrapped()
            self._check_pair(from_index, to_index)
            if amount_in < 0:
                raise InvalidAmountError(f"Swap amount must be non-negative, got {amount_in}")
            now = self.clock()
            self._settle_schedule(now)

            state = self.state
            weights = self._pricing_weights(now)
            amount_out = calc_out(
                state.balances[from_index],
                weights[from_index],
                state.balances[to_index],
                weights[to_index],
                amount_in,
                fee=self.config.swap_fee,
            )

            state.balances[from_index] = (S(state.balances[from_index]) + amount_in).to_uint64()
            state.balances[to_index] = (S(state.balances[to_index]) - amount_out).to_uint64()
            if amount_out > 0:
                settlement.transfers.append(
                    Transfer(self.pool_id, state.assets[to_index], depositor, amount_out)
                )

        logger.info(
            "swap_executed",
            pool_id=self.pool_id,
            depositor=depositor,
            from_index=from_index,
            to_index=to_index,
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return amount_out

    def change_weights(self, duration: int, new_weights: Sequence[int]) -> int:
        """Start moving the weights linearly to new_weights over duration seconds.

        Any schedule in flight is replaced. Its progress so far is kept: the
        weights in effect right now become the starting point, rebalanced so
        they sum to exactly SCALE.

        Returns:
            End time of the new schedule

        Raises:
            PoolNotBootstrappedError: If the pool is not bootstrapped
            InvalidWeightsError: If new_weights are invalid
            InvalidAmountError: If duration is negative
        """
        with self._transaction("change_weights"):
            self._require_bootstrapped()
            validate_weights(
                new_weights, self.state.total_assets, tolerance=self.config.weight_tolerance
            )
            now = self.clock()
            schedule = new_schedule(now, duration, new_weights)
            self._settle_schedule(now)
            # Each interpolated weight is floored on its own
            self.state.weights = rebalance_weights(effective_weights(self.state, now))
            self.state.schedule = schedule

        logger.info(
            "weights_change_scheduled",
            pool_id=self.pool_id,
            start_weights=self.state.weights,
            target_weights=list(schedule.target_weights),
            start_time=schedule.start_time,
            end_time=schedule.end_time,
        )
        return schedule.end_time

    def finalize_weights(self) -> bool:
        """Copy the target weights into static storage once a schedule ended.

        Returns:
            True if a schedule was finalized by this call
        """
        with self._transaction("finalize_weights"):
            self._require_bootstrapped()
            schedule = self.state.schedule
            now = self.clock()
            finalized = schedule is not None and schedule_complete(schedule, now)
            self._settle_schedule(now)
        return finalized

    # =========================================================================
    # Read-only queries
    # =========================================================================

    def get_current_weight(self, asset_index: int) -> int:
        """Weight of one asset right now, following any schedule in flight."""
        self._check_index(asset_index)
        return interpolate_weight(
            self.state.weights[asset_index],
            self.state.schedule,
            asset_index,
            self.clock(),
        )

    def get_current_weights(self) -> list[int]:
        return effective_weights(self.state, self.clock())

    def get_balance(self, asset_index: int) -> int:
        self._check_index(asset_index)
        return self.state.balances[asset_index]

    def get_total_assets(self) -> int:
        return self.state.total_assets

    def get_token(self) -> int:
        """Share token id of the pool."""
        return self._share_token()

    def get_contribution(self, depositor: str) -> tuple[int, ...]:
        return self.state.contribution(depositor)

    def get_times(self) -> tuple[int, int, int]:
        """Return (start_time, end_time, now) of the latest schedule.

        Both times are 0 when no weight change was ever requested.
        """
        now = self.clock()
        schedule = self.state.schedule
        if schedule is None:
            return 0, 0, now
        return schedule.start_time, schedule.end_time, now

    def interpolation_time_left(self) -> int:
        """Seconds until the latest schedule reaches its target weights."""
        _, end_time, now = self.get_times()
        return max(0, end_time - now)

    def estimate_swap(self, from_index: int, to_index: int, amount_in: int) -> int:
        """Output a swap would produce right now, without executing it."""
        self._require_bootstrapped()
        self._check_pair(from_index, to_index)
        if amount_in < 0:
            raise InvalidAmountError(f"Swap amount must be non-negative, got {amount_in}")
        weights = self._pricing_weights(self.clock())
        return calc_out(
            self.state.balances[from_index],
            weights[from_index],
            self.state.balances[to_index],
            weights[to_index],
            amount_in,
            fee=self.config.swap_fee,
        )

    @property
    def circulating_supply(self) -> int:
        return self.state.circulating_supply
