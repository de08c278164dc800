"""FastAPI dependency injection setup.

Services are assembled per request from the adapters owned by the
global ``ConnectionManager``.
"""

from __future__ import annotations

from functools import lru_cache

from ...application.brand_service import BrandService
from ...application.category_service import CategoryService
from ...application.product_image_service import ProductImageService
from ...application.product_service import ProductService
from ...ports.configuration import ConfigurationPort
from ..connection_manager import ConnectionManager, get_connection_manager
from ..factory import InfrastructureFactory


@lru_cache
def get_configuration_port() -> ConfigurationPort:
    """Get the configuration port instance using factory.

    Returns:
        ConfigurationPort: Configuration port implementation
    """
    return InfrastructureFactory.create_configuration_port()


def get_manager() -> ConnectionManager:
    return get_connection_manager()


def get_brand_service() -> BrandService:
    manager = get_connection_manager()
    return BrandService(
        manager.repositories.brands,
        manager.blob_storage,
        image_bucket=manager.config.brand_image_bucket,
        default_image_name=manager.config.default_brand_image_name,
    )


def get_category_service() -> CategoryService:
    manager = get_connection_manager()
    return CategoryService(
        manager.repositories.categories,
        manager.blob_storage,
        image_bucket=manager.config.category_image_bucket,
        default_image_name=manager.config.default_category_image_name,
    )


def get_product_service() -> ProductService:
    manager = get_connection_manager()
    repositories = manager.repositories
    return ProductService(
        repositories.products,
        repositories.brands,
        repositories.categories,
        manager.event_publisher,
    )


def get_product_image_service() -> ProductImageService:
    manager = get_connection_manager()
    return ProductImageService(
        manager.repositories.product_images,
        manager.repositories.products,
        manager.blob_storage,
        image_bucket=manager.config.product_image_bucket,
        max_product_images=manager.config.max_product_images,
    )
