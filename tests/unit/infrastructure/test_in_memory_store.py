"""Tests for the in-memory catalog store and its repositories."""

from __future__ import annotations

import asyncio
from uuid import uuid4

import pytest

from catalog_service.domain.entities import Brand, Category
from catalog_service.domain.exceptions import StoreException
from catalog_service.infrastructure.persistence.in_memory_store import (
    InMemoryBrandRepository,
    InMemoryCategoryRepository,
    InMemoryProductImageRepository,
    InMemoryProductRepository,
)


@pytest.fixture
def brands(store):
    return InMemoryBrandRepository(store)


@pytest.fixture
def categories(store):
    return InMemoryCategoryRepository(store)


@pytest.fixture
def products(store):
    return InMemoryProductRepository(store)


@pytest.fixture
def images(store):
    return InMemoryProductImageRepository(store)


class TestBrandRepository:
    async def test_crud(self, brands, brand):
        assert await brands.add(brand) is True
        assert await brands.add(brand) is False
        assert await brands.exists(brand.id)

        brand.update(name="Acme Corp", description="d", image_file_name=None, display_order=2)
        assert await brands.update(brand) is True
        assert (await brands.get_by_id(brand.id)).name == "Acme Corp"

        assert await brands.remove_by_id(brand.id) is True
        assert await brands.remove_by_id(brand.id) is False
        assert await brands.update(brand) is False

    async def test_reads_return_copies(self, brands, brand, store):
        await brands.add(brand)

        loaded = await brands.get_by_id(brand.id)
        loaded.update(name="Other", description="d", image_file_name=None, display_order=1)

        assert store.brands[brand.id].name == "Acme"

    async def test_remove_nulls_product_brand(self, brands, products, brand, product):
        await brands.add(brand)
        product.update(
            brand_id=brand.id,
            category_id=None,
            name=product.name,
            description=product.description,
            price=product.price,
            discount=product.discount,
            sku=product.sku,
            stock=product.stock,
            availability=True,
        )
        await products.add(product)

        await brands.remove_by_id(brand.id)

        assert (await products.get_by_id(product.id)).brand_id is None


class TestCategoryRepository:
    async def test_rejects_unknown_parent(self, categories):
        orphan = Category.create(name="Orphan", description="d", parent_category_id=uuid4())
        assert await categories.add(orphan) is False

    async def test_remove_reparents_children(self, categories):
        parent = Category.create(name="Parent", description="d")
        child = Category.create(name="Child", description="d", parent_category_id=parent.id)
        await categories.add(parent)
        await categories.add(child)

        await categories.remove_by_id(parent.id)

        assert (await categories.get_by_id(child.id)).parent_category_id is None
        roots = await categories.get_subcategories_by_parent_id(None)
        assert [c.id for c in roots] == [child.id]


class TestProductRepository:
    async def test_rejects_unknown_references(self, products, product):
        product.update(
            brand_id=uuid4(),
            category_id=None,
            name=product.name,
            description=product.description,
            price=product.price,
            discount=product.discount,
            sku=product.sku,
            stock=product.stock,
            availability=True,
        )
        assert await products.add(product) is False

    async def test_reads_attach_ordered_images(self, products, images, product, make_image):
        await products.add(product)
        await images.add(make_image(product.id, 1, "b.png"))
        await images.add(make_image(product.id, 0, "a.png"))

        loaded = await products.get_by_id(product.id)

        assert [i.image_file_name for i in loaded.images] == ["a.png", "b.png"]

    async def test_remove_deletes_images(self, products, images, product, make_image, store):
        await products.add(product)
        await images.add(make_image(product.id))

        await products.remove_by_id(product.id)

        assert store.images == {}


class TestProductImageRepository:
    async def test_requires_existing_product(self, images, make_image):
        assert await images.add(make_image(uuid4())) is False

    async def test_batch_update_is_all_or_nothing(self, products, images, product, make_image):
        await products.add(product)
        stored = make_image(product.id, 0)
        await images.add(stored)
        stored.update(display_order=3)
        unknown = make_image(product.id, 1)

        assert await images.batch_update([stored, unknown]) is False
        assert (await images.get_by_id(stored.id)).display_order == 0
        assert await images.batch_update([]) is True

    async def test_count(self, products, images, product, make_image):
        await products.add(product)
        await images.add(make_image(product.id, 0))
        await images.add(make_image(product.id, 1))

        assert await images.get_product_image_count(product.id) == 2
        assert await images.get_product_image_count(uuid4()) == 0


class TestTransactions:
    async def test_rollback_restores_all_tables(self, store, brands, brand):
        await brands.add(brand)
        extra = Brand.create(name="Extra", description="d")

        with pytest.raises(ValueError):
            async with store.transaction():
                await brands.add(extra)
                await brands.remove_by_id(brand.id)
                raise ValueError("abort")

        assert set(store.brands) == {brand.id}

    async def test_commit_keeps_changes(self, store, brands, brand):
        async with store.transaction():
            await brands.add(brand)

        assert brand.id in store.brands

    async def test_nested_transaction_joins_outer(self, store, brands, brand):
        with pytest.raises(ValueError):
            async with store.transaction():
                async with store.transaction():
                    await brands.add(brand)
                raise ValueError("abort")

        assert store.brands == {}

    async def test_transactions_are_serialized(self, store):
        order: list[str] = []

        async def worker(name: str) -> None:
            async with store.transaction():
                order.append(f"{name}-start")
                await asyncio.sleep(0)
                order.append(f"{name}-end")

        await asyncio.gather(worker("a"), worker("b"))

        assert order == ["a-start", "a-end", "b-start", "b-end"]


class TestFailureSimulation:
    async def test_operations_raise_until_recovered(self, store, brands):
        store.simulate_failure("database offline")

        with pytest.raises(StoreException) as exc_info:
            await brands.get_all()
        assert exc_info.value.operation == "brand.get_all"

        store.recover()
        assert await brands.get_all() == []
