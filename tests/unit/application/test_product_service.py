"""Tests for the product application service."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from catalog_service.application.product_service import ProductService
from catalog_service.domain.events import ProductDeletedEvent
from catalog_service.domain.exceptions import (
    BrandNotFoundException,
    CategoryNotFoundException,
    ProductNotFoundException,
)
from catalog_service.domain.models import ProductOrderBy, ProductQueryParameters
from catalog_service.infrastructure.messaging.in_memory_event_publisher import (
    InMemoryEventPublisher,
)
from catalog_service.infrastructure.persistence.in_memory_store import (
    InMemoryBrandRepository,
    InMemoryCategoryRepository,
    InMemoryProductRepository,
)


@pytest.fixture
def publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def brands(store):
    return InMemoryBrandRepository(store)


@pytest.fixture
def service(store, brands, publisher):
    return ProductService(
        InMemoryProductRepository(store),
        brands,
        InMemoryCategoryRepository(store),
        publisher,
    )


async def _create(service, name, price, discount="0", sku=None):
    return await service.create_product(
        name=name,
        description=f"{name} description",
        price=Decimal(price),
        sku=sku or f"{name[:4].upper():X<10}",
        discount=Decimal(discount),
    )


class TestListing:
    async def test_default_order_is_name_ascending(self, service):
        await _create(service, "banana", "3.00")
        await _create(service, "Apple", "5.00")
        await _create(service, "cherry", "1.00")

        page = await service.list_products(ProductQueryParameters())

        assert [p.name for p in page.items] == ["Apple", "banana", "cherry"]
        assert page.total_count == 3
        assert page.total_pages == 1

    async def test_order_by_price_descending_with_paging(self, service):
        for index, price in enumerate(["3.00", "5.00", "1.00", "4.00"]):
            await _create(service, f"Item{index}", price)

        page = await service.list_products(
            ProductQueryParameters(
                page_number=2, page_size=2, order_by=ProductOrderBy.PRICE, is_ascending=False
            )
        )

        assert [p.price for p in page.items] == [Decimal("3.00"), Decimal("1.00")]
        assert page.current_page == 2
        assert page.total_pages == 2

    async def test_page_past_the_end_is_empty(self, service):
        await _create(service, "Anvil", "10.00")

        page = await service.list_products(ProductQueryParameters(page_number=5, page_size=10))

        assert page.items == []
        assert page.total_count == 1


class TestLifecycle:
    async def test_create_derives_slug_and_discounted_price(self, service):
        product = await _create(service, "Anvil", "100.00", discount="0.25", sku="ANVIL00001")

        stored = await service.get_product(product.id)

        assert stored.slug == "anvil-anvil00001"
        assert stored.discounted_price == Decimal("75.0000")

    async def test_unknown_references_rejected(self, service):
        with pytest.raises(BrandNotFoundException) as exc_info:
            await service.create_product(
                name="Anvil",
                description="d",
                price=Decimal("1"),
                sku="ANVIL00001",
                brand_id=uuid4(),
            )
        assert exc_info.value.details["field"] == "brand_id"

        with pytest.raises(CategoryNotFoundException):
            await service.create_product(
                name="Anvil",
                description="d",
                price=Decimal("1"),
                sku="ANVIL00001",
                category_id=uuid4(),
            )

    async def test_update(self, service, brands, brand):
        await brands.add(brand)
        product = await _create(service, "Anvil", "100.00")

        updated = await service.update_product(
            product.id,
            name="Anvil Pro",
            description="Heavier",
            price=Decimal("150.00"),
            sku="ANVILPRO01",
            discount=Decimal("0"),
            stock=3,
            availability=True,
            brand_id=brand.id,
            category_id=None,
        )

        assert updated.slug == "anvil-pro-anvilpro01"
        assert (await service.get_product(product.id)).brand_id == brand.id

    async def test_delete_publishes_event(self, service, publisher):
        product = await _create(service, "Anvil", "100.00")

        await service.delete_product(product.id)

        assert len(publisher.events) == 1
        event = publisher.events[0]
        assert isinstance(event, ProductDeletedEvent)
        assert event.product_id == product.id
        with pytest.raises(ProductNotFoundException):
            await service.get_product(product.id)

    async def test_delete_missing_product_publishes_nothing(self, service, publisher):
        with pytest.raises(ProductNotFoundException):
            await service.delete_product(uuid4())
        assert publisher.events == []
