"""Repository ports for catalog entities.

Store-backed adapters and the caching decorators both implement these
interfaces, so callers cannot tell them apart by contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from uuid import UUID

from ..domain.entities import Brand, Category, Product, ProductImage
from ..domain.models import IsolationLevel


class UnitOfWorkRepository(ABC):
    """Common transaction scoping shared by every repository."""

    @abstractmethod
    def transaction(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> AbstractAsyncContextManager[None]:
        """Scope a multi-step operation in a single store transaction.

        Changes made inside the block are rolled back if it raises.
        """
        ...


class BrandRepositoryPort(UnitOfWorkRepository):
    """Persistence operations for brands."""

    @abstractmethod
    async def get_all(self) -> list[Brand]:
        ...

    @abstractmethod
    async def get_by_id(self, brand_id: UUID) -> Brand | None:
        ...

    @abstractmethod
    async def add(self, brand: Brand) -> bool:
        """Insert a brand. Returns False if the store refused the row."""
        ...

    @abstractmethod
    async def update(self, brand: Brand) -> bool:
        ...

    @abstractmethod
    async def remove_by_id(self, brand_id: UUID) -> bool:
        ...

    @abstractmethod
    async def exists(self, brand_id: UUID) -> bool:
        ...


class CategoryRepositoryPort(UnitOfWorkRepository):
    """Persistence operations for categories."""

    @abstractmethod
    async def get_all(self) -> list[Category]:
        ...

    @abstractmethod
    async def get_subcategories_by_parent_id(
        self, parent_category_id: UUID | None
    ) -> list[Category]:
        """Return the direct children of a category, or the root categories for None."""
        ...

    @abstractmethod
    async def get_by_id(self, category_id: UUID) -> Category | None:
        ...

    @abstractmethod
    async def add(self, category: Category) -> bool:
        ...

    @abstractmethod
    async def update(self, category: Category) -> bool:
        ...

    @abstractmethod
    async def remove_by_id(self, category_id: UUID) -> bool:
        ...

    @abstractmethod
    async def exists(self, category_id: UUID) -> bool:
        ...


class ProductRepositoryPort(UnitOfWorkRepository):
    """Persistence operations for products."""

    @abstractmethod
    async def get_all(self) -> list[Product]:
        ...

    @abstractmethod
    async def get_by_id(self, product_id: UUID) -> Product | None:
        ...

    @abstractmethod
    async def add(self, product: Product) -> bool:
        ...

    @abstractmethod
    async def update(self, product: Product) -> bool:
        ...

    @abstractmethod
    async def remove_by_id(self, product_id: UUID) -> bool:
        ...

    @abstractmethod
    async def exists(self, product_id: UUID) -> bool:
        ...


class ProductImageRepositoryPort(UnitOfWorkRepository):
    """Persistence operations for product images."""

    @abstractmethod
    async def get_all_by_product_id(self, product_id: UUID) -> list[ProductImage]:
        """Return a product's images ordered by display order."""
        ...

    @abstractmethod
    async def get_by_id(self, image_id: UUID) -> ProductImage | None:
        ...

    @abstractmethod
    async def add(self, image: ProductImage) -> bool:
        ...

    @abstractmethod
    async def update(self, image: ProductImage) -> bool:
        ...

    @abstractmethod
    async def batch_update(self, images: list[ProductImage]) -> bool:
        """Persist several images at once. All or nothing."""
        ...

    @abstractmethod
    async def remove_by_id(self, image_id: UUID) -> bool:
        ...

    @abstractmethod
    async def exists(self, image_id: UUID) -> bool:
        ...

    @abstractmethod
    async def get_product_image_count(self, product_id: UUID) -> int:
        ...
