"""HTTP API for weighted pools."""

from weighted_pool.api.main import app

__all__ = ["app"]
