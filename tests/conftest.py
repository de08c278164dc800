"""Shared pytest fixtures for catalog service tests."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import Mock

import pytest

from catalog_service.domain.entities import Brand, Category, Product, ProductImage
from catalog_service.infrastructure.cache.cache_manager import CacheConfig, CacheManager
from catalog_service.infrastructure.cache.in_memory_backend import InMemoryCacheBackend
from catalog_service.infrastructure.in_memory_metrics import InMemoryMetrics
from catalog_service.infrastructure.persistence.in_memory_store import InMemoryCatalogStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_backend(clock):
    return InMemoryCacheBackend(clock=clock)


@pytest.fixture
def metrics():
    return InMemoryMetrics()


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    logger = Mock()
    logger.debug = Mock()
    logger.info = Mock()
    logger.warning = Mock()
    logger.error = Mock()
    logger.exception = Mock()
    return logger


@pytest.fixture
def cache_manager(cache_backend, metrics, mock_logger):
    return CacheManager(
        cache_backend,
        CacheConfig(ttl_seconds=300.0),
        metrics=metrics,
        logger=mock_logger,
    )


@pytest.fixture
def store():
    return InMemoryCatalogStore()


@pytest.fixture
def brand():
    return Brand.create(name="Acme", description="Tools and anvils", display_order=0)


@pytest.fixture
def category():
    return Category.create(name="Hardware", description="Everything made of metal")


@pytest.fixture
def product():
    return Product.create(
        name="Anvil 3000",
        description="A very heavy anvil",
        price=Decimal("199.99"),
        sku="ANV3000XYZ",
        discount=Decimal("0.15"),
        stock=7,
    )


@pytest.fixture
def make_image():
    def _make(product_id, display_order=0, name=None):
        return ProductImage.create(
            product_id=product_id,
            image_file_name=name or f"image-{display_order}.png",
            display_order=display_order,
        )

    return _make
