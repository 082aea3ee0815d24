"""Pool error classes.

Every error aborts the current operation as a whole; no state is changed.
"""


class PoolError(Exception):
    """Base error for pool operations."""

    pass


class PoolNotBootstrappedError(PoolError):
    """Operation requires a bootstrapped pool."""

    pass


class PoolAlreadyBootstrappedError(PoolError):
    """Bootstrap may only run once per pool."""

    pass


class InvalidAssetsError(PoolError):
    """Asset list is too short, has duplicates or does not match the weights."""

    pass


class InvalidWeightsError(PoolError):
    """Weights must be positive, one per asset, and sum to SCALE."""

    pass


class InvalidAssetIndexError(PoolError):
    """Asset index is out of range (or both swap sides are the same asset)."""

    pass


class InvalidAmountError(PoolError):
    """Amount is out of range for the operation."""

    pass


class ZeroBalanceError(PoolError):
    """A pool balance of zero is used as a divisor."""

    pass


class ZeroWeightError(PoolError):
    """Token weight must be positive."""

    pass


class MissingContributionError(PoolError):
    """Minting requires a contribution for every pool asset."""

    pass


class InsufficientSharesError(PoolError):
    """Share amount exceeds what is circulating or held in reserve."""

    pass


class PoolExistsError(PoolError):
    """A pool with the same assets and weights is already registered."""

    pass


class PoolNotFoundError(PoolError):
    """No pool is registered under the requested identity."""

    pass
