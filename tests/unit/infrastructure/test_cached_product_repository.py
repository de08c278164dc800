"""Tests for the caching product and product image repositories."""

from __future__ import annotations

from unittest.mock import Mock
from uuid import uuid4

import pytest

from catalog_service.infrastructure.cache.cached_product_image_repository import (
    CachedProductImageRepository,
)
from catalog_service.infrastructure.cache.cached_product_repository import (
    CachedProductRepository,
)
from catalog_service.infrastructure.persistence.in_memory_store import (
    InMemoryProductImageRepository,
    InMemoryProductRepository,
)


@pytest.fixture
def inner_products(store):
    return Mock(wraps=InMemoryProductRepository(store))


@pytest.fixture
def inner_images(store):
    return Mock(wraps=InMemoryProductImageRepository(store))


@pytest.fixture
def products(inner_products, cache_manager):
    return CachedProductRepository(inner_products, cache_manager)


@pytest.fixture
def images(inner_images, cache_manager):
    return CachedProductImageRepository(inner_images, cache_manager)


@pytest.fixture
async def stored_product(products, product):
    assert await products.add(product)
    return product


class TestCachedProductRepository:
    async def test_reads_served_from_cache(self, products, inner_products, stored_product):
        await products.get_by_id(stored_product.id)
        cached = await products.get_by_id(stored_product.id)
        await products.get_all()
        await products.get_all()

        assert cached.slug == "anvil-3000-anv3000xyz"
        assert cached.discounted_price == stored_product.discounted_price
        assert inner_products.get_by_id.call_count == 1
        assert inner_products.get_all.call_count == 1

    async def test_update_visible_on_next_read(self, products, stored_product):
        await products.get_by_id(stored_product.id)

        stored_product.update(
            brand_id=None,
            category_id=None,
            name=stored_product.name,
            description=stored_product.description,
            price=stored_product.price,
            discount=stored_product.discount,
            sku=stored_product.sku,
            stock=0,
            availability=False,
        )
        await products.update(stored_product)

        fetched = await products.get_by_id(stored_product.id)
        assert fetched.stock == 0
        assert fetched.availability is False

    async def test_remove_drops_image_listing(
        self, products, images, stored_product, make_image, cache_backend
    ):
        await images.add(make_image(stored_product.id))
        await images.get_all_by_product_id(stored_product.id)

        assert await products.remove_by_id(stored_product.id)

        assert f"ProductImage_All_{stored_product.id}" not in cache_backend.keys()
        assert await images.get_all_by_product_id(stored_product.id) == []

    async def test_remove_drops_cached_images(
        self, products, images, inner_images, stored_product, make_image, cache_backend
    ):
        first = make_image(stored_product.id, 0)
        second = make_image(stored_product.id, 1)
        await images.add(first)
        await images.add(second)
        await images.get_by_id(first.id)
        await images.get_by_id(second.id)

        assert await products.remove_by_id(stored_product.id)

        assert cache_backend.keys() == []
        assert await images.get_by_id(first.id) is None
        assert await images.exists(second.id) is False
        assert inner_images.exists.call_count == 1

    async def test_remove_unknown_product(self, products):
        assert await products.remove_by_id(uuid4()) is False

    async def test_exists(self, products, inner_products, stored_product):
        assert await products.exists(uuid4()) is False
        await products.get_by_id(stored_product.id)
        assert await products.exists(stored_product.id) is True
        assert inner_products.exists.call_count == 1


class TestCachedProductImageRepository:
    async def test_listing_cached_per_product(
        self, images, inner_images, stored_product, make_image
    ):
        await images.add(make_image(stored_product.id, 0))
        await images.add(make_image(stored_product.id, 1))

        await images.get_all_by_product_id(stored_product.id)
        listed = await images.get_all_by_product_id(stored_product.id)

        assert [image.display_order for image in listed] == [0, 1]
        assert await images.get_product_image_count(stored_product.id) == 2
        assert inner_images.get_all_by_product_id.call_count == 1
        inner_images.get_product_image_count.assert_not_called()

    async def test_image_write_drops_product_entries(
        self, products, images, stored_product, make_image
    ):
        await products.get_by_id(stored_product.id)
        await products.get_all()

        await images.add(make_image(stored_product.id))

        assert len((await products.get_by_id(stored_product.id)).images) == 1
        assert len((await products.get_all())[0].images) == 1

    async def test_batch_update_invalidates_every_item(
        self, images, stored_product, make_image, cache_backend
    ):
        first = make_image(stored_product.id, 0)
        second = make_image(stored_product.id, 1)
        await images.add(first)
        await images.add(second)
        await images.get_by_id(first.id)
        await images.get_by_id(second.id)
        await images.get_all_by_product_id(stored_product.id)

        first.update(display_order=1)
        second.update(display_order=0)
        assert await images.batch_update([first, second])

        assert cache_backend.keys() == []
        listed = await images.get_all_by_product_id(stored_product.id)
        assert [image.id for image in listed] == [second.id, first.id]

    async def test_remove_invalidates_owner_entries(
        self, images, inner_images, stored_product, make_image, cache_backend
    ):
        image = make_image(stored_product.id)
        await images.add(image)
        await images.get_all_by_product_id(stored_product.id)

        assert await images.remove_by_id(image.id)

        assert cache_backend.keys() == []
        assert await images.get_product_image_count(stored_product.id) == 0

    async def test_rolled_back_remove_leaves_no_stale_listing(
        self, images, stored_product, make_image
    ):
        image = make_image(stored_product.id)
        await images.add(image)

        with pytest.raises(RuntimeError):
            async with images.transaction():
                assert await images.remove_by_id(image.id)
                # filled from the uncommitted delete
                assert await images.get_all_by_product_id(stored_product.id) == []
                raise RuntimeError("abort")

        listed = await images.get_all_by_product_id(stored_product.id)
        assert [i.id for i in listed] == [image.id]
        assert (await images.get_by_id(image.id)).id == image.id

    async def test_remove_unknown_image(self, images):
        assert await images.remove_by_id(uuid4()) is False
