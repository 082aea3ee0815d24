"""FastAPI application for weighted pools."""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI

from weighted_pool import __version__
from weighted_pool.api.endpoints import router

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("POOL_HOST", "0.0.0.0")
PORT = int(os.environ.get("POOL_PORT", "8000"))
DEBUG = os.environ.get("POOL_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="Weighted Pool",
    description="Weighted multi-asset liquidity pools",
    version=__version__,
)

app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def configure_logging(debug: bool = DEBUG) -> None:
    """Configure structlog for console output."""
    log_level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - POOL_HOST: Host to bind to (default: 0.0.0.0)
    - POOL_PORT: Port to bind to (default: 8000)
    - POOL_DEBUG: Enable debug logging and reload mode (default: false)
    """
    configure_logging()
    uvicorn.run(
        "weighted_pool.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
