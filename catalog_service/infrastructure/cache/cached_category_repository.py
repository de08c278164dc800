"""Caching decorator for the category repository."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from ...domain.entities import Category
from ...domain.models import IsolationLevel
from ...ports.repositories import CategoryRepositoryPort, ProductRepositoryPort
from .cache_manager import CacheManager
from .cached_product_repository import product_keys_referencing
from .keys import CATEGORY_KEYS, subcategories_key
from .serialization import EntityCodec, EntityListCodec

_CATEGORY_CODEC = EntityCodec(Category)
_CATEGORY_LIST_CODEC = EntityListCodec(Category)


class CachedCategoryRepository(CategoryRepositoryPort):
    """Category repository with read-through caching.

    Besides ``Category_{id}`` and ``Category_All``, children of a category
    are cached under ``Category_Sub_{parentId}``. A write invalidates the
    listing of every parent the category belongs to before or after the
    write, so the previous state is read before the store is touched.
    Deleting a category also drops the entries of products filed under it,
    found through the uncached ``products`` repository.
    """

    def __init__(
        self,
        inner: CategoryRepositoryPort,
        cache_manager: CacheManager,
        ttl_seconds: float | None = None,
        products: ProductRepositoryPort | None = None,
    ):
        self._inner = inner
        self._cache = cache_manager
        self._ttl_seconds = ttl_seconds or cache_manager.default_ttl_seconds
        self._products = products

    @asynccontextmanager
    async def transaction(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> AsyncIterator[None]:
        async with self._cache.deferred_invalidation():
            async with self._inner.transaction(isolation_level):
                yield

    async def get_all(self) -> list[Category]:
        categories = await self._cache.get_from_cache(
            CATEGORY_KEYS.all, self._inner.get_all, _CATEGORY_LIST_CODEC, self._ttl_seconds
        )
        return categories or []

    async def get_subcategories_by_parent_id(
        self, parent_category_id: UUID | None
    ) -> list[Category]:
        categories = await self._cache.get_from_cache(
            subcategories_key(parent_category_id),
            lambda: self._inner.get_subcategories_by_parent_id(parent_category_id),
            _CATEGORY_LIST_CODEC,
            self._ttl_seconds,
        )
        return categories or []

    async def get_by_id(self, category_id: UUID) -> Category | None:
        return await self._cache.get_from_cache(
            CATEGORY_KEYS.item(category_id),
            lambda: self._inner.get_by_id(category_id),
            _CATEGORY_CODEC,
            self._ttl_seconds,
        )

    def _keys_for(self, category_id: UUID, *parent_ids: UUID | None) -> list[str]:
        keys = [CATEGORY_KEYS.item(category_id), CATEGORY_KEYS.all]
        keys.extend(subcategories_key(parent_id) for parent_id in parent_ids)
        return keys

    async def add(self, category: Category) -> bool:
        result = await self._inner.add(category)
        await self._cache.invalidate_cache(
            self._keys_for(category.id, category.parent_category_id)
        )
        return result

    async def update(self, category: Category) -> bool:
        previous = await self.get_by_id(category.id)
        result = await self._inner.update(category)

        parent_ids = [category.parent_category_id]
        if previous is not None:
            parent_ids.append(previous.parent_category_id)
        await self._cache.invalidate_cache(self._keys_for(category.id, *parent_ids))
        return result

    async def remove_by_id(self, category_id: UUID) -> bool:
        category = await self.get_by_id(category_id)
        product_keys = await product_keys_referencing(
            self._products, lambda product: product.category_id == category_id
        )
        result = await self._inner.remove_by_id(category_id)

        parent_ids: list[UUID | None] = []
        if category is not None:
            parent_ids.append(category.parent_category_id)
        # children were re-parented to the root by the store cascade
        parent_ids.extend([category_id, None])
        await self._cache.invalidate_cache(
            [*self._keys_for(category_id, *parent_ids), *product_keys]
        )
        return result

    async def exists(self, category_id: UUID) -> bool:
        if await self._cache.key_exists(CATEGORY_KEYS.item(category_id)):
            return True
        return await self._inner.exists(category_id)
