"""Weighted pool swap math.

Core pricing function for weighted product pools.
"""

from weighted_pool.constants import SWAP_FEE
from weighted_pool.math.fixed_point import SCALE, mul_div, power

from .errors import InvalidAmountError, ZeroWeightError


def calc_out(
    balance_in: int,
    weight_in: int,
    balance_out: int,
    weight_out: int,
    amount_in: int,
    *,
    fee: int = SWAP_FEE,
) -> int:
    """Calculate output amount for a given input.

    The fee is taken from amount_in here, before the curve is evaluated.

    Formula:
        amount_out = balance_out * (1 - (balance_in / (balance_in + amount_in_with_fee))^(weight_in / weight_out))

    When amount_in dwarfs balance_in the ratio floors to zero and the whole
    of balance_out is paid out.

    Args:
        balance_in: Pool balance of the input asset
        weight_in: Weight of the input asset (must be positive)
        balance_out: Pool balance of the output asset
        weight_out: Weight of the output asset (must be positive)
        amount_in: Input amount, before fee
        fee: Swap fee in SCALE units

    Returns:
        Output amount, in the output asset's native units

    Raises:
        ZeroWeightError: If weight_in or weight_out is zero
        InvalidAmountError: If an amount or balance is negative, or fee is not in [0, SCALE)
    """
    if weight_in <= 0:
        raise ZeroWeightError("weight_in must be positive")
    if weight_out <= 0:
        raise ZeroWeightError("weight_out must be positive")
    if amount_in < 0 or balance_in < 0 or balance_out < 0:
        raise InvalidAmountError("amounts and balances must be non-negative")
    if not 0 <= fee < SCALE:
        raise InvalidAmountError(f"Swap fee must be in range [0, {SCALE}), got {fee}")

    amount_in_with_fee = mul_div(amount_in, SCALE - fee, SCALE)

    denominator = balance_in + amount_in_with_fee
    if denominator == 0:
        return 0

    # ratio = balance_in / (balance_in + amount_in_with_fee), at most 1
    ratio = mul_div(balance_in, SCALE, denominator)

    exponent = mul_div(weight_in, SCALE, weight_out)

    ratio_pow = power(ratio, exponent)

    # amount_out = balance_out * (1 - ratio_pow), rounded down
    return mul_div(balance_out, max(0, SCALE - ratio_pow), SCALE)
