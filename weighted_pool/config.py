"""Pool configuration."""

from dataclasses import dataclass

from weighted_pool.constants import (
    AMOUNT_LP_DEPLOYER,
    SHARE_TOTAL_SUPPLY,
    SWAP_FEE,
    WEIGHT_TOLERANCE,
)


@dataclass(frozen=True)
class PoolConfig:
    """Centralized configuration for pool behaviour.

    Holds the economic constants and behaviour flags of a pool, so tests can
    run pools with different settings and every pool created by one registry
    behaves the same way.

    Attributes:
        swap_fee: Fee taken from swap inputs, in SCALE units (default: 0.1%)
        amount_lp_deployer: Shares minted for the first deposit (default: 1,000,000)
        share_total_supply: Total supply of the share token (default: 2^64 - 1)
        weight_tolerance: Allowed distance between sum(weights) and SCALE
        price_with_scheduled_weights: If True, swaps, estimates and mints use
            the interpolated weight while a weight change is in flight. If
            False, they use the stored static weight, which only changes when
            the schedule is finalized.
    """

    swap_fee: int = SWAP_FEE
    amount_lp_deployer: int = AMOUNT_LP_DEPLOYER
    share_total_supply: int = SHARE_TOTAL_SUPPLY
    weight_tolerance: int = WEIGHT_TOLERANCE

    # Behavior flags
    price_with_scheduled_weights: bool = True


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
