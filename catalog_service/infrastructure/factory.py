"""Infrastructure factory for creating adapters and dependencies.

This module follows the Factory pattern to centralize the creation of
infrastructure components, promoting loose coupling and testability.
"""

from __future__ import annotations

from dataclasses import dataclass

from nats.aio.client import Client as NATSClient

from ..domain.exceptions import ConfigurationException
from ..domain.models import CatalogConfiguration
from ..ports.blob_storage import BlobStoragePort
from ..ports.cache_backend import CacheBackendPort
from ..ports.configuration import ConfigurationPort
from ..ports.event_publisher import EventPublisherPort
from ..ports.logger import LoggerPort
from ..ports.metrics import MetricsPort
from ..ports.repositories import (
    BrandRepositoryPort,
    CategoryRepositoryPort,
    ProductImageRepositoryPort,
    ProductRepositoryPort,
)
from .blob.in_memory_blob_storage import InMemoryBlobStorage
from .blob.nats_object_storage import NATSObjectBlobStorage
from .cache.cache_manager import CacheConfig, CacheManager
from .cache.cached_brand_repository import CachedBrandRepository
from .cache.cached_category_repository import CachedCategoryRepository
from .cache.cached_product_image_repository import CachedProductImageRepository
from .cache.cached_product_repository import CachedProductRepository
from .cache.in_memory_backend import InMemoryCacheBackend
from .cache.nats_kv_backend import NATSKVCacheBackend
from .configuration_adapter import EnvironmentConfigurationAdapter
from .in_memory_metrics import InMemoryMetrics
from .messaging.in_memory_event_publisher import InMemoryEventPublisher
from .messaging.nats_event_publisher import NATSEventPublisher
from .persistence.in_memory_store import (
    InMemoryBrandRepository,
    InMemoryCatalogStore,
    InMemoryCategoryRepository,
    InMemoryProductImageRepository,
    InMemoryProductRepository,
)
from .simple_logger import SimpleLogger


@dataclass(frozen=True)
class CatalogRepositories:
    """The repository set handed to the application services."""

    brands: BrandRepositoryPort
    categories: CategoryRepositoryPort
    products: ProductRepositoryPort
    product_images: ProductImageRepositoryPort


class InfrastructureFactory:
    """Factory for creating infrastructure adapters following hexagonal architecture.

    Adapters are chosen from the configuration; NATS-backed adapters need
    the connection owned by the ``ConnectionManager``.
    """

    @staticmethod
    def create_configuration_port() -> ConfigurationPort:
        return EnvironmentConfigurationAdapter()

    @staticmethod
    def create_logger(name: str) -> LoggerPort:
        return SimpleLogger(name)

    @staticmethod
    def create_metrics() -> MetricsPort:
        return InMemoryMetrics()

    @staticmethod
    async def create_cache_backend(
        config: CatalogConfiguration, nc: NATSClient | None = None
    ) -> CacheBackendPort:
        """Create the shared cache backend.

        Args:
            config: Service configuration
            nc: Connected NATS client, required for the NATS backend

        Returns:
            CacheBackendPort implementation, connected and ready
        """
        if config.cache_backend == "memory":
            return InMemoryCacheBackend()
        if nc is None:
            raise ConfigurationException("NATS cache backend requires a NATS connection")

        backend = NATSKVCacheBackend(
            nc.jetstream(),
            config.cache_bucket,
            ttl_seconds=config.cache_ttl_seconds,
            logger=InfrastructureFactory.create_logger("catalog_service.cache.nats_kv"),
        )
        await backend.connect()
        return backend

    @staticmethod
    def create_cache_manager(
        config: CatalogConfiguration,
        backend: CacheBackendPort,
        metrics: MetricsPort | None = None,
    ) -> CacheManager:
        cache_config = CacheConfig(
            ttl_seconds=config.cache_ttl_seconds,
            fail_open=config.cache_fail_open,
        )
        return CacheManager(
            backend,
            cache_config,
            metrics=metrics,
            logger=InfrastructureFactory.create_logger("catalog_service.cache"),
        )

    @staticmethod
    def create_store() -> InMemoryCatalogStore:
        logger = InfrastructureFactory.create_logger("catalog_service.store")
        return InMemoryCatalogStore(logger=logger)

    @staticmethod
    def create_repositories(
        store: InMemoryCatalogStore, cache_manager: CacheManager
    ) -> CatalogRepositories:
        """Wrap each store-backed repository in its caching decorator."""
        products = InMemoryProductRepository(store)
        return CatalogRepositories(
            brands=CachedBrandRepository(
                InMemoryBrandRepository(store), cache_manager, products=products
            ),
            categories=CachedCategoryRepository(
                InMemoryCategoryRepository(store), cache_manager, products=products
            ),
            products=CachedProductRepository(products, cache_manager),
            product_images=CachedProductImageRepository(
                InMemoryProductImageRepository(store), cache_manager
            ),
        )

    @staticmethod
    def create_blob_storage(
        config: CatalogConfiguration, nc: NATSClient | None = None
    ) -> BlobStoragePort:
        if config.blob_backend == "memory":
            return InMemoryBlobStorage()
        if nc is None:
            raise ConfigurationException("NATS blob storage requires a NATS connection")
        logger = InfrastructureFactory.create_logger("catalog_service.blob.nats")
        return NATSObjectBlobStorage(nc.jetstream(), logger=logger)

    @staticmethod
    def create_event_publisher(
        config: CatalogConfiguration, nc: NATSClient | None = None
    ) -> EventPublisherPort:
        if nc is None:
            return InMemoryEventPublisher()
        return NATSEventPublisher(
            nc,
            config.product_deleted_subject,
            logger=InfrastructureFactory.create_logger("catalog_service.messaging.nats"),
        )
