"""Liquidity share math.

Mint and burn amounts for multi-asset weighted pools. All divisions round
down, so rounding always stays in the pool.
"""

from __future__ import annotations

from collections.abc import Sequence

from weighted_pool.constants import AMOUNT_LP_DEPLOYER
from weighted_pool.math.fixed_point import SCALE, mul_div, power

from .errors import (
    InsufficientSharesError,
    InvalidAmountError,
    MissingContributionError,
    ZeroBalanceError,
)


def calc_shares_minted(
    balances: Sequence[int],
    weights: Sequence[int],
    contribution: Sequence[int],
    circulating_supply: int,
    *,
    amount_lp_deployer: int = AMOUNT_LP_DEPLOYER,
) -> int:
    """Calculate shares owed for a depositor's contribution vector.

    The contribution has already been added to balances. For every asset the
    contributed amount is compared with the balance before the contribution,
    and the weighted geometric mean of those ratios scales the circulating
    supply:

        minted = circulating * prod_i (contribution_i / (balance_i - contribution_i))^weight_i

    The first-ever deposit (nothing circulating) mints a fixed amount.

    Args:
        balances: Pool balances, contribution included
        weights: Weight per asset (SCALE fixed-point)
        contribution: Depositor's amounts since their last mint
        circulating_supply: Shares outstanding before this mint
        amount_lp_deployer: Shares minted for the first deposit

    Returns:
        Number of shares to mint

    Raises:
        MissingContributionError: If any asset has no contribution
        ZeroBalanceError: If any asset had no balance before the contribution
    """
    missing = [i for i, amount in enumerate(contribution) if amount <= 0]
    if missing:
        raise MissingContributionError(f"No contribution for asset indices {missing}")

    if circulating_supply == 0:
        return amount_lp_deployer

    product = SCALE
    for balance, weight, amount in zip(balances, weights, contribution, strict=True):
        balance_before = balance - amount
        if balance_before <= 0:
            raise ZeroBalanceError("Pool balance must be positive before the contribution")
        ratio = mul_div(amount, SCALE, balance_before)
        product = mul_div(product, power(ratio, weight), SCALE)

    return mul_div(circulating_supply, product, SCALE)


def calc_burn_payouts(
    balances: Sequence[int],
    share_amount: int,
    circulating_supply: int,
) -> list[int]:
    """Calculate the assets paid out for burning shares.

    Each asset pays share_amount / circulating_supply of its balance, with
    circulating_supply taken before the burn.

    Args:
        balances: Pool balances
        share_amount: Shares being burned (must be positive)
        circulating_supply: Shares outstanding before the burn

    Returns:
        Payout per asset, in native units

    Raises:
        InvalidAmountError: If share_amount <= 0
        InsufficientSharesError: If share_amount exceeds the circulating supply
    """
    if share_amount <= 0:
        raise InvalidAmountError(f"Burn amount must be positive, got {share_amount}")
    if share_amount > circulating_supply:
        raise InsufficientSharesError(
            f"Burn amount {share_amount} exceeds circulating supply {circulating_supply}"
        )
    return [mul_div(share_amount, balance, circulating_supply) for balance in balances]
