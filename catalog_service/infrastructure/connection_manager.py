"""Connection manager for infrastructure resources.

This module manages the lifecycle of infrastructure connections,
providing a clean separation between connection management and business logic.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import nats
from nats.aio.client import Client as NATSClient

from ..domain.exceptions import CacheBackendError, ConfigurationException
from .factory import CatalogRepositories, InfrastructureFactory

if TYPE_CHECKING:
    from ..domain.models import CatalogConfiguration
    from ..ports.blob_storage import BlobStoragePort
    from ..ports.cache_backend import CacheBackendPort
    from ..ports.event_publisher import EventPublisherPort
    from ..ports.metrics import MetricsPort
    from .cache.cache_manager import CacheManager
    from .persistence.in_memory_store import InMemoryCatalogStore

logger = logging.getLogger(__name__)

HEALTH_PROBE_KEY = "Health_Probe"


class ConnectionManager:
    """Owns the process-wide connections and the adapters built on them.

    The NATS connection and the cache backend are created once at startup
    and passed explicitly to every adapter that needs them.
    """

    def __init__(self, config: CatalogConfiguration):
        """Initialize the connection manager.

        Args:
            config: Service configuration
        """
        self.config = config
        self._nc: NATSClient | None = None
        self._cache_backend: CacheBackendPort | None = None
        self._cache_manager: CacheManager | None = None
        self._store: InMemoryCatalogStore | None = None
        self._repositories: CatalogRepositories | None = None
        self._blob_storage: BlobStoragePort | None = None
        self._event_publisher: EventPublisherPort | None = None
        self._metrics: MetricsPort = InfrastructureFactory.create_metrics()

    async def startup(self) -> None:
        """Initialize all connections during application startup."""
        try:
            if self.config.uses_nats:
                logger.info(f"Connecting to NATS at {self.config.nats_url}...")
                self._nc = await nats.connect(self.config.nats_url)
                logger.info("NATS connected successfully")

            self._cache_backend = await InfrastructureFactory.create_cache_backend(
                self.config, self._nc
            )
            self._cache_manager = InfrastructureFactory.create_cache_manager(
                self.config, self._cache_backend, self._metrics
            )
            logger.info(
                f"Cache backend '{self.config.cache_backend}' ready "
                f"(ttl={self.config.cache_ttl_seconds}s, fail_open={self.config.cache_fail_open})"
            )

            self._store = InfrastructureFactory.create_store()
            self._repositories = InfrastructureFactory.create_repositories(
                self._store, self._cache_manager
            )
            self._blob_storage = InfrastructureFactory.create_blob_storage(self.config, self._nc)
            self._event_publisher = InfrastructureFactory.create_event_publisher(
                self.config, self._nc
            )
            logger.info("Catalog repositories and adapters initialized")
        except Exception as e:
            logger.error(f"Failed to initialize connections: {e}")
            await self.shutdown()
            raise ConfigurationException(f"Failed to initialize connections: {e}") from e

    async def shutdown(self) -> None:
        """Clean up all connections during application shutdown."""
        if self._nc is not None and not self._nc.is_closed:
            try:
                await self._nc.drain()
                logger.info("Disconnected from NATS")
            except Exception as e:
                logger.error(f"Error during shutdown: {e}")
        self._nc = None

    async def check_cache_backend(self) -> dict[str, Any]:
        """Probe the cache backend directly, bypassing fail-open handling."""
        try:
            await self.cache_backend.exists(HEALTH_PROBE_KEY)
        except CacheBackendError as e:
            return {"status": "unhealthy", "error": e.message}
        return {"status": "healthy", "backend": self.config.cache_backend}

    def _require(self, component: Any, name: str) -> Any:
        if component is None:
            raise RuntimeError(f"{name} not initialized. Call startup() first.")
        return component

    @property
    def cache_backend(self) -> CacheBackendPort:
        return self._require(self._cache_backend, "Cache backend")

    @property
    def cache_manager(self) -> CacheManager:
        return self._require(self._cache_manager, "Cache manager")

    @property
    def store(self) -> InMemoryCatalogStore:
        return self._require(self._store, "Store")

    @property
    def repositories(self) -> CatalogRepositories:
        return self._require(self._repositories, "Repositories")

    @property
    def blob_storage(self) -> BlobStoragePort:
        return self._require(self._blob_storage, "Blob storage")

    @property
    def event_publisher(self) -> EventPublisherPort:
        return self._require(self._event_publisher, "Event publisher")

    @property
    def metrics(self) -> MetricsPort:
        return self._metrics


# Global instance managed by the application lifecycle
_connection_manager: ConnectionManager | None = None


def get_connection_manager() -> ConnectionManager:
    """Get the global connection manager instance.

    Raises:
        RuntimeError: If not initialized
    """
    if not _connection_manager:
        raise RuntimeError("Connection manager not initialized")
    return _connection_manager


def set_connection_manager(manager: ConnectionManager | None) -> None:
    """Set the global connection manager instance."""
    global _connection_manager
    _connection_manager = manager
