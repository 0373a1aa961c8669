"""
FastAPI application with assembled routers.

Initializes the FastAPI app, wires the database engine, broker connection
and status-update consumer into the application lifespan, and configures
the uvicorn server.

Dependencies: fastapi, docingest.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docingest.api.deps import get_service_cache
from docingest.application.events import StatusUpdateHandler
from docingest.boundary.broker import StatusUpdateConsumer, make_loop_dispatcher
from docingest.boundary.db import get_async_engine, get_async_session_factory
from docingest.configs import get_settings
from docingest.core.exceptions import BrokerUnavailableError
from docingest.observability import configure_logging
from docingest.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import documents_router, health_router, ingestion_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup: configure logging, connect the broker, start the consumer.
    Shutdown: stop the consumer, release the broker, dispose the engine.
    A broker outage at startup is logged; HTTP keeps serving and the
    consumer keeps retrying in its own thread.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    # Startup
    cache = get_service_cache()
    try:
        await asyncio.to_thread(cache.broker.connect)
    except BrokerUnavailableError as e:
        logger.error(f"Broker unavailable at startup: {e}")

    consumer = None
    if settings.broker.consumer_enabled:
        handler = StatusUpdateHandler(get_async_session_factory(), cache.publisher)
        consumer = StatusUpdateConsumer(
            cache.broker,
            make_loop_dispatcher(
                handler,
                asyncio.get_running_loop(),
                settings.broker.handler_timeout_seconds,
            ),
        )
        consumer.start()
    logger.info(f"{settings.service_name} startup complete ({settings.environment})")

    yield

    # Shutdown
    if consumer is not None:
        await asyncio.to_thread(consumer.stop)
    cache.clear()
    await get_async_engine().dispose()
    logger.info("Application shutdown complete")


def create_app(use_lifespan: bool = True) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        use_lifespan: Wire broker/consumer startup (tests disable it)

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Document Ingestion API",
        description="Document upload, ingestion tracking and attempt history",
        version="0.1.0",
        lifespan=lifespan if use_lifespan else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(ingestion_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "docingest.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
