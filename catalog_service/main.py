"""Main entry point for the catalog service API.

This module sets up the FastAPI application using hexagonal architecture,
with clear separation between framework concerns and business logic.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from . import __version__
from .domain.models import CatalogConfiguration
from .infrastructure.api.dependencies import get_configuration_port
from .infrastructure.api.error_handlers import register_error_handlers
from .infrastructure.api.routes import router
from .infrastructure.connection_manager import ConnectionManager, set_connection_manager

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(config: CatalogConfiguration | None = None) -> FastAPI:
    """Build the application.

    Args:
        config: Explicit configuration; loaded from the environment when None
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        logger.info("Starting catalog service")
        service_config = config or get_configuration_port().load_configuration()
        logger.info(f"Service configured for environment: {service_config.environment}")
        logger.info(
            f"Cache backend: {service_config.cache_backend}, "
            f"blob backend: {service_config.blob_backend}"
        )

        connection_manager = ConnectionManager(service_config)
        await connection_manager.startup()
        set_connection_manager(connection_manager)
        logger.info("Service is ready to handle requests")

        try:
            yield
        finally:
            logger.info("Shutting down catalog service")
            await connection_manager.shutdown()
            set_connection_manager(None)

    app = FastAPI(
        title="Catalog Service",
        description="Product catalog API with read-through caching",
        version=__version__,
        lifespan=lifespan,
    )
    register_error_handlers(app)
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Run the API with uvicorn using the configured port."""
    config = get_configuration_port().load_configuration()
    uvicorn.run(app, host="0.0.0.0", port=config.api_port, log_level=config.log_level.lower())


if __name__ == "__main__":
    run()
