"""Caching decorator for the brand repository."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from ...domain.entities import Brand
from ...domain.models import IsolationLevel
from ...ports.repositories import BrandRepositoryPort, ProductRepositoryPort
from .cache_manager import CacheManager
from .cached_product_repository import product_keys_referencing
from .keys import BRAND_KEYS
from .serialization import EntityCodec, EntityListCodec

_BRAND_CODEC = EntityCodec(Brand)
_BRAND_LIST_CODEC = EntityListCodec(Brand)


class CachedBrandRepository(BrandRepositoryPort):
    """Brand repository with read-through caching.

    Reads go through ``Brand_{id}`` and ``Brand_All``. Every write reaches
    the inner repository first and then invalidates the keys it affects
    before returning the inner result unchanged.

    Deleting a brand clears the brand of its products in the store, so the
    entries of those products are dropped as well. They are found through
    ``products``, an uncached product repository over the same store.
    """

    def __init__(
        self,
        inner: BrandRepositoryPort,
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

    async def get_all(self) -> list[Brand]:
        brands = await self._cache.get_from_cache(
            BRAND_KEYS.all, self._inner.get_all, _BRAND_LIST_CODEC, self._ttl_seconds
        )
        return brands or []

    async def get_by_id(self, brand_id: UUID) -> Brand | None:
        return await self._cache.get_from_cache(
            BRAND_KEYS.item(brand_id),
            lambda: self._inner.get_by_id(brand_id),
            _BRAND_CODEC,
            self._ttl_seconds,
        )

    async def add(self, brand: Brand) -> bool:
        result = await self._inner.add(brand)
        await self._cache.invalidate_cache([BRAND_KEYS.item(brand.id), BRAND_KEYS.all])
        return result

    async def update(self, brand: Brand) -> bool:
        result = await self._inner.update(brand)
        await self._cache.invalidate_cache([BRAND_KEYS.item(brand.id), BRAND_KEYS.all])
        return result

    async def remove_by_id(self, brand_id: UUID) -> bool:
        product_keys = await product_keys_referencing(
            self._products, lambda product: product.brand_id == brand_id
        )
        result = await self._inner.remove_by_id(brand_id)
        await self._cache.invalidate_cache(
            [BRAND_KEYS.item(brand_id), BRAND_KEYS.all, *product_keys]
        )
        return result

    async def exists(self, brand_id: UUID) -> bool:
        if await self._cache.key_exists(BRAND_KEYS.item(brand_id)):
            return True
        return await self._inner.exists(brand_id)
