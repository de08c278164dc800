"""Caching decorator for the product repository."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from uuid import UUID

from ...domain.entities import Product
from ...domain.models import IsolationLevel
from ...ports.repositories import ProductRepositoryPort
from .cache_manager import CacheManager
from .keys import PRODUCT_IMAGE_KEYS, PRODUCT_KEYS, product_images_key
from .serialization import EntityCodec, EntityListCodec

_PRODUCT_CODEC = EntityCodec(Product)
_PRODUCT_LIST_CODEC = EntityListCodec(Product)


class CachedProductRepository(ProductRepositoryPort):
    """Product repository with read-through caching over ``Product_{id}`` and ``Product_All``."""

    def __init__(
        self,
        inner: ProductRepositoryPort,
        cache_manager: CacheManager,
        ttl_seconds: float | None = None,
    ):
        self._inner = inner
        self._cache = cache_manager
        self._ttl_seconds = ttl_seconds or cache_manager.default_ttl_seconds

    @asynccontextmanager
    async def transaction(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> AsyncIterator[None]:
        async with self._cache.deferred_invalidation():
            async with self._inner.transaction(isolation_level):
                yield

    async def get_all(self) -> list[Product]:
        products = await self._cache.get_from_cache(
            PRODUCT_KEYS.all, self._inner.get_all, _PRODUCT_LIST_CODEC, self._ttl_seconds
        )
        return products or []

    async def get_by_id(self, product_id: UUID) -> Product | None:
        return await self._cache.get_from_cache(
            PRODUCT_KEYS.item(product_id),
            lambda: self._inner.get_by_id(product_id),
            _PRODUCT_CODEC,
            self._ttl_seconds,
        )

    async def add(self, product: Product) -> bool:
        result = await self._inner.add(product)
        await self._cache.invalidate_cache([PRODUCT_KEYS.item(product.id), PRODUCT_KEYS.all])
        return result

    async def update(self, product: Product) -> bool:
        result = await self._inner.update(product)
        await self._cache.invalidate_cache([PRODUCT_KEYS.item(product.id), PRODUCT_KEYS.all])
        return result

    async def remove_by_id(self, product_id: UUID) -> bool:
        product = await self.get_by_id(product_id)
        result = await self._inner.remove_by_id(product_id)

        # the store deletes the product's images with it
        keys = [PRODUCT_KEYS.item(product_id), PRODUCT_KEYS.all, product_images_key(product_id)]
        if product is not None:
            keys.extend(PRODUCT_IMAGE_KEYS.item(image.id) for image in product.images)
        await self._cache.invalidate_cache(keys)
        return result

    async def exists(self, product_id: UUID) -> bool:
        if await self._cache.key_exists(PRODUCT_KEYS.item(product_id)):
            return True
        return await self._inner.exists(product_id)


async def product_keys_referencing(
    products: ProductRepositoryPort | None, references: Callable[[Product], bool]
) -> list[str]:
    """Product keys a store cascade rewrites when a referenced row is deleted.

    Without a product repository only ``Product_All`` is returned.
    """
    if products is None:
        return [PRODUCT_KEYS.all]
    keys = [
        PRODUCT_KEYS.item(product.id)
        for product in await products.get_all()
        if references(product)
    ]
    keys.append(PRODUCT_KEYS.all)
    return keys
