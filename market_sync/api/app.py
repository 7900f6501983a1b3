"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from market_sync.api.routes import router
from market_sync.database.connection import initialize_database
from market_sync.errors import (
    InputValidationError,
    MarketSyncError,
    StoreError,
    UpstreamShapeError,
    UpstreamUnavailableError,
)
from market_sync.ingestion.job import run_configured_cycle
from market_sync.ingestion.scheduler import IngestionScheduler
from market_sync.utils.config import Settings
from market_sync.utils.logger import get_logger

logger = get_logger(__name__)

# Status code per error kind; anything else is a 500
ERROR_STATUS_CODES: dict[type[MarketSyncError], int] = {
    InputValidationError: 400,
    StoreError: 500,
    UpstreamUnavailableError: 502,
    UpstreamShapeError: 502,
}


def _status_for(exc: MarketSyncError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


async def handle_market_sync_error(request: Request, exc: MarketSyncError) -> JSONResponse:
    """Turn a typed error into a JSON error response."""
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed (%s): %s", request.method, request.url.path, exc.kind, exc)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"message": str(exc), "kind": exc.kind})


def create_app(settings: Settings | None = None, run_scheduler: bool = False) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Service settings (read from the environment if None)
        run_scheduler: Start the ingestion scheduler for the app's lifetime

    Returns:
        Configured FastAPI instance
    """
    settings = settings or Settings.from_env()
    initialize_database(settings.db_path)

    scheduler = (
        IngestionScheduler(settings.job_schedule, lambda: run_configured_cycle(settings))
        if run_scheduler
        else None
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not settings.upstream_token:
            logger.warning("MARKET_SYNC_UPSTREAM_TOKEN is empty; upstream calls will likely be rejected")
        if scheduler is not None:
            scheduler.start()
            logger.info("Next ingestion cycle at %s", scheduler.next_run().isoformat(timespec="seconds"))
        logger.info("Application startup complete")
        yield
        if scheduler is not None:
            scheduler.stop()
        logger.info("Application shutdown complete")

    app = FastAPI(title="market-sync", lifespan=lifespan)
    app.state.settings = settings
    app.state.scheduler = scheduler
    app.add_exception_handler(MarketSyncError, handle_market_sync_error)
    app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
