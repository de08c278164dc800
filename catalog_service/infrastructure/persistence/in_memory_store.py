"""In-memory catalog store.

This is an infrastructure adapter that implements the repository ports
for development and testing. It mirrors the referential behavior of the
relational schema: foreign keys must point at existing rows, and deletes
cascade or null out dependent references.
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import TypeVar
from uuid import UUID

from ...domain.entities import Brand, CatalogEntity, Category, Product, ProductImage
from ...domain.exceptions import StoreException
from ...domain.models import IsolationLevel
from ...ports.logger import LoggerPort
from ...ports.repositories import (
    BrandRepositoryPort,
    CategoryRepositoryPort,
    ProductImageRepositoryPort,
    ProductRepositoryPort,
)
from ..simple_logger import SimpleLogger

E = TypeVar("E", bound=CatalogEntity)


class InMemoryCatalogStore:
    """Tables for every catalog entity plus transaction scoping."""

    def __init__(self, logger: LoggerPort | None = None) -> None:
        self.brands: dict[UUID, Brand] = {}
        self.categories: dict[UUID, Category] = {}
        self.products: dict[UUID, Product] = {}
        self.images: dict[UUID, ProductImage] = {}
        self._logger = logger or SimpleLogger("catalog_service.store")
        self._lock = asyncio.Lock()
        self._owner: asyncio.Task | None = None
        self._failure: str | None = None

    def simulate_failure(self, message: str = "Store unavailable") -> None:
        """Make every subsequent operation raise ``StoreException``."""
        self._failure = message

    def recover(self) -> None:
        self._failure = None

    def check_available(self, operation: str) -> None:
        if self._failure is not None:
            raise StoreException(self._failure, operation=operation)

    @asynccontextmanager
    async def transaction(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> AsyncIterator[None]:
        """Run the block atomically; tables are restored if it raises.

        Transactions are serialized, so every isolation level behaves as
        serializable here. Nested transactions join the outer one.
        """
        self.check_available("transaction")
        current = asyncio.current_task()
        if self._owner is not None and self._owner is current:
            yield
            return

        async with self._lock:
            self._owner = current
            snapshot = self._snapshot()
            self._logger.debug("Transaction started", isolation_level=isolation_level.value)
            try:
                yield
            except BaseException:
                self._restore(snapshot)
                self._logger.debug("Transaction rolled back")
                raise
            finally:
                self._owner = None

    def _snapshot(self) -> tuple[dict, dict, dict, dict]:
        return (
            dict(self.brands),
            dict(self.categories),
            dict(self.products),
            dict(self.images),
        )

    def _restore(self, snapshot: tuple[dict, dict, dict, dict]) -> None:
        self.brands, self.categories, self.products, self.images = snapshot

    def product_images(self, product_id: UUID) -> list[ProductImage]:
        images = [image for image in self.images.values() if image.product_id == product_id]
        return sorted(images, key=lambda image: image.display_order)


def _copy(entity: E) -> E:
    return copy.deepcopy(entity)


class _StoreRepository:
    """Shared plumbing for the table-backed repositories."""

    def __init__(self, store: InMemoryCatalogStore):
        self._store = store

    def transaction(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> AbstractAsyncContextManager[None]:
        return self._store.transaction(isolation_level)


class InMemoryBrandRepository(_StoreRepository, BrandRepositoryPort):
    async def get_all(self) -> list[Brand]:
        self._store.check_available("brand.get_all")
        return [_copy(brand) for brand in self._store.brands.values()]

    async def get_by_id(self, brand_id: UUID) -> Brand | None:
        self._store.check_available("brand.get_by_id")
        brand = self._store.brands.get(brand_id)
        return _copy(brand) if brand else None

    async def add(self, brand: Brand) -> bool:
        self._store.check_available("brand.add")
        if brand.id in self._store.brands:
            return False
        self._store.brands[brand.id] = _copy(brand)
        return True

    async def update(self, brand: Brand) -> bool:
        self._store.check_available("brand.update")
        if brand.id not in self._store.brands:
            return False
        self._store.brands[brand.id] = _copy(brand)
        return True

    async def remove_by_id(self, brand_id: UUID) -> bool:
        self._store.check_available("brand.remove_by_id")
        if self._store.brands.pop(brand_id, None) is None:
            return False
        for product in list(self._store.products.values()):
            if product.brand_id == brand_id:
                self._store.products[product.id] = product.model_copy(update={"brand_id": None})
        return True

    async def exists(self, brand_id: UUID) -> bool:
        self._store.check_available("brand.exists")
        return brand_id in self._store.brands


class InMemoryCategoryRepository(_StoreRepository, CategoryRepositoryPort):
    def _parent_is_valid(self, category: Category) -> bool:
        parent_id = category.parent_category_id
        return parent_id is None or parent_id in self._store.categories

    async def get_all(self) -> list[Category]:
        self._store.check_available("category.get_all")
        return [_copy(category) for category in self._store.categories.values()]

    async def get_subcategories_by_parent_id(
        self, parent_category_id: UUID | None
    ) -> list[Category]:
        self._store.check_available("category.get_subcategories_by_parent_id")
        return [
            _copy(category)
            for category in self._store.categories.values()
            if category.parent_category_id == parent_category_id
        ]

    async def get_by_id(self, category_id: UUID) -> Category | None:
        self._store.check_available("category.get_by_id")
        category = self._store.categories.get(category_id)
        return _copy(category) if category else None

    async def add(self, category: Category) -> bool:
        self._store.check_available("category.add")
        if category.id in self._store.categories or not self._parent_is_valid(category):
            return False
        self._store.categories[category.id] = _copy(category)
        return True

    async def update(self, category: Category) -> bool:
        self._store.check_available("category.update")
        if category.id not in self._store.categories or not self._parent_is_valid(category):
            return False
        self._store.categories[category.id] = _copy(category)
        return True

    async def remove_by_id(self, category_id: UUID) -> bool:
        self._store.check_available("category.remove_by_id")
        if self._store.categories.pop(category_id, None) is None:
            return False
        for child in list(self._store.categories.values()):
            if child.parent_category_id == category_id:
                self._store.categories[child.id] = child.model_copy(
                    update={"parent_category_id": None}
                )
        for product in list(self._store.products.values()):
            if product.category_id == category_id:
                self._store.products[product.id] = product.model_copy(
                    update={"category_id": None}
                )
        return True

    async def exists(self, category_id: UUID) -> bool:
        self._store.check_available("category.exists")
        return category_id in self._store.categories


class InMemoryProductRepository(_StoreRepository, ProductRepositoryPort):
    def _references_are_valid(self, product: Product) -> bool:
        if product.brand_id is not None and product.brand_id not in self._store.brands:
            return False
        return product.category_id is None or product.category_id in self._store.categories

    def _with_images(self, product: Product) -> Product:
        return product.model_copy(
            update={"images": [_copy(i) for i in self._store.product_images(product.id)]},
            deep=True,
        )

    def _stored(self, product: Product) -> Product:
        # images live in their own table
        return product.model_copy(update={"images": []}, deep=True)

    async def get_all(self) -> list[Product]:
        self._store.check_available("product.get_all")
        return [self._with_images(product) for product in self._store.products.values()]

    async def get_by_id(self, product_id: UUID) -> Product | None:
        self._store.check_available("product.get_by_id")
        product = self._store.products.get(product_id)
        return self._with_images(product) if product else None

    async def add(self, product: Product) -> bool:
        self._store.check_available("product.add")
        if product.id in self._store.products or not self._references_are_valid(product):
            return False
        self._store.products[product.id] = self._stored(product)
        return True

    async def update(self, product: Product) -> bool:
        self._store.check_available("product.update")
        if product.id not in self._store.products or not self._references_are_valid(product):
            return False
        self._store.products[product.id] = self._stored(product)
        return True

    async def remove_by_id(self, product_id: UUID) -> bool:
        self._store.check_available("product.remove_by_id")
        if self._store.products.pop(product_id, None) is None:
            return False
        for image in self._store.product_images(product_id):
            del self._store.images[image.id]
        return True

    async def exists(self, product_id: UUID) -> bool:
        self._store.check_available("product.exists")
        return product_id in self._store.products


class InMemoryProductImageRepository(_StoreRepository, ProductImageRepositoryPort):
    async def get_all_by_product_id(self, product_id: UUID) -> list[ProductImage]:
        self._store.check_available("product_image.get_all_by_product_id")
        return [_copy(image) for image in self._store.product_images(product_id)]

    async def get_by_id(self, image_id: UUID) -> ProductImage | None:
        self._store.check_available("product_image.get_by_id")
        image = self._store.images.get(image_id)
        return _copy(image) if image else None

    async def add(self, image: ProductImage) -> bool:
        self._store.check_available("product_image.add")
        if image.id in self._store.images or image.product_id not in self._store.products:
            return False
        self._store.images[image.id] = _copy(image)
        return True

    async def update(self, image: ProductImage) -> bool:
        self._store.check_available("product_image.update")
        if image.id not in self._store.images or image.product_id not in self._store.products:
            return False
        self._store.images[image.id] = _copy(image)
        return True

    async def batch_update(self, images: list[ProductImage]) -> bool:
        self._store.check_available("product_image.batch_update")
        for image in images:
            if image.id not in self._store.images or image.product_id not in self._store.products:
                return False
        for image in images:
            self._store.images[image.id] = _copy(image)
        return True

    async def remove_by_id(self, image_id: UUID) -> bool:
        self._store.check_available("product_image.remove_by_id")
        return self._store.images.pop(image_id, None) is not None

    async def exists(self, image_id: UUID) -> bool:
        self._store.check_available("product_image.exists")
        return image_id in self._store.images

    async def get_product_image_count(self, product_id: UUID) -> int:
        self._store.check_available("product_image.get_product_image_count")
        return len(self._store.product_images(product_id))
