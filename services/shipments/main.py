"""
Shipments Service - FastAPI Application

Accepts shipment tracking events and lists them per shipment. Records are
held in memory and expire a fixed time after insertion.
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from services.common.http_errors import register_briefly_exception_handlers
from services.common.logging_config import (
    create_request_logging_middleware,
    get_logger,
    log_service_shutdown,
    log_service_startup,
    setup_service_logging,
)
from services.shipments.routers import api_router
from services.shipments.schemas import HealthResponse
from services.shipments.settings import Settings, get_settings
from services.shipments.store import TrackingStore

SERVICE_NAME = "shipments"
SERVICE_VERSION = "0.1.0"

# Set up centralized logging - will be initialized in lifespan
logger = get_logger(__name__)


async def sweep_expired_records(store: TrackingStore, period_seconds: float) -> None:
    """Periodically drop expired records so memory tracks the live set."""
    while True:
        await asyncio.sleep(period_seconds)
        removed = store.purge_expired()
        if removed:
            logger.info("Expired tracking records removed", count=removed)
        logger.debug("Tracking store stats", **store.stats())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    store: TrackingStore = app.state.tracking_store

    setup_service_logging(
        service_name=SERVICE_NAME,
        log_level=settings.log_level,
        log_format=settings.log_format,
    )

    log_service_startup(
        SERVICE_NAME,
        version=SERVICE_VERSION,
        environment=settings.environment,
        debug=settings.debug,
        url=f"http://localhost:{settings.port}",
        tracking_ttl_seconds=store.ttl_seconds,
    )

    sweeper: Optional[asyncio.Task] = None
    if settings.check_period_seconds > 0:
        sweeper = asyncio.create_task(
            sweep_expired_records(store, settings.check_period_seconds)
        )

    yield

    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
    log_service_shutdown(SERVICE_NAME)


def create_app(
    settings: Optional[Settings] = None, store: Optional[TrackingStore] = None
) -> FastAPI:
    """
    Build the shipments application.

    Args:
        settings: Settings to use, defaults to the process-wide instance
        store: Record store to serve from, a fresh one is created if omitted

    Returns:
        Configured FastAPI application owning exactly one TrackingStore
    """
    if settings is None:
        settings = get_settings()
    if store is None:
        store = TrackingStore(ttl_seconds=settings.tracking_ttl_seconds)

    app = FastAPI(
        title="Shipments Tracking Service",
        version=SERVICE_VERSION,
        description="Shipment tracking record microservice.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tracking_store = store

    # Add request logging middleware
    app.middleware("http")(create_request_logging_middleware())

    # Register exception handlers
    register_briefly_exception_handlers(app)

    app.include_router(api_router)

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(
            status="healthy", service=SERVICE_NAME, version=SERVICE_VERSION
        )

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
        access_log=False,  # request logging is done by the middleware
    )


if __name__ == "__main__":
    run()
