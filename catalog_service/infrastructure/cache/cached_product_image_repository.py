"""Caching decorator for the product image repository."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from uuid import UUID

from ...domain.entities import ProductImage
from ...domain.models import IsolationLevel
from ...ports.repositories import ProductImageRepositoryPort
from .cache_manager import CacheManager
from .keys import PRODUCT_IMAGE_KEYS, PRODUCT_KEYS, product_images_key
from .serialization import EntityCodec, EntityListCodec

_IMAGE_CODEC = EntityCodec(ProductImage)
_IMAGE_LIST_CODEC = EntityListCodec(ProductImage)


class CachedProductImageRepository(ProductImageRepositoryPort):
    """Product image repository with read-through caching.

    Images are cached individually under ``ProductImage_{id}`` and per
    product under ``ProductImage_All_{productId}``. Product entries embed
    their images, so image writes also drop the owning product's entries.
    """

    def __init__(
        self,
        inner: ProductImageRepositoryPort,
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

    async def get_all_by_product_id(self, product_id: UUID) -> list[ProductImage]:
        images = await self._cache.get_from_cache(
            product_images_key(product_id),
            lambda: self._inner.get_all_by_product_id(product_id),
            _IMAGE_LIST_CODEC,
            self._ttl_seconds,
        )
        return images or []

    async def get_by_id(self, image_id: UUID) -> ProductImage | None:
        return await self._cache.get_from_cache(
            PRODUCT_IMAGE_KEYS.item(image_id),
            lambda: self._inner.get_by_id(image_id),
            _IMAGE_CODEC,
            self._ttl_seconds,
        )

    def _keys_for(self, images: Iterable[tuple[UUID, UUID]]) -> list[str]:
        keys: list[str] = []
        for image_id, product_id in images:
            keys.extend(
                [
                    PRODUCT_IMAGE_KEYS.item(image_id),
                    product_images_key(product_id),
                    PRODUCT_KEYS.item(product_id),
                ]
            )
        keys.append(PRODUCT_KEYS.all)
        return keys

    async def add(self, image: ProductImage) -> bool:
        result = await self._inner.add(image)
        await self._cache.invalidate_cache(self._keys_for([(image.id, image.product_id)]))
        return result

    async def update(self, image: ProductImage) -> bool:
        result = await self._inner.update(image)
        await self._cache.invalidate_cache(self._keys_for([(image.id, image.product_id)]))
        return result

    async def batch_update(self, images: list[ProductImage]) -> bool:
        result = await self._inner.batch_update(images)
        for image in images:
            await self._cache.invalidate_cache(self._keys_for([(image.id, image.product_id)]))
        return result

    async def remove_by_id(self, image_id: UUID) -> bool:
        image = await self.get_by_id(image_id)
        result = await self._inner.remove_by_id(image_id)

        keys = [PRODUCT_IMAGE_KEYS.item(image_id)]
        if image is not None:
            keys = self._keys_for([(image_id, image.product_id)])
        await self._cache.invalidate_cache(keys)
        return result

    async def exists(self, image_id: UUID) -> bool:
        if await self._cache.key_exists(PRODUCT_IMAGE_KEYS.item(image_id)):
            return True
        return await self._inner.exists(image_id)

    async def get_product_image_count(self, product_id: UUID) -> int:
        images = await self.get_all_by_product_id(product_id)
        return len(images)
