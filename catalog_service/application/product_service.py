"""Application service for products."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from ..domain.entities import Product
from ..domain.events import ProductDeletedEvent
from ..domain.exceptions import (
    BrandNotFoundException,
    CategoryNotFoundException,
    ConflictException,
    ProductNotFoundException,
)
from ..domain.models import PaginatedList, ProductOrderBy, ProductQueryParameters

if TYPE_CHECKING:
    from ..ports.event_publisher import EventPublisherPort
    from ..ports.repositories import (
        BrandRepositoryPort,
        CategoryRepositoryPort,
        ProductRepositoryPort,
    )

logger = logging.getLogger(__name__)

_SORT_KEYS = {
    ProductOrderBy.NAME: lambda product: product.name.lower(),
    ProductOrderBy.PRICE: lambda product: product.price,
    ProductOrderBy.DISCOUNT: lambda product: product.discount,
}


class ProductService:
    """Service for product listing and lifecycle.

    Deleting a product publishes ``ProductDeletedEvent`` once the store
    has removed it.
    """

    def __init__(
        self,
        products: ProductRepositoryPort,
        brands: BrandRepositoryPort,
        categories: CategoryRepositoryPort,
        event_publisher: EventPublisherPort,
    ):
        self._products = products
        self._brands = brands
        self._categories = categories
        self._event_publisher = event_publisher

    async def list_products(self, parameters: ProductQueryParameters) -> PaginatedList[Product]:
        """Return one page of products ordered as requested.

        Args:
            parameters: Page, page size, sort field and direction

        Returns:
            The requested page with paging metadata
        """
        products = await self._products.get_all()
        ordered = sorted(
            products,
            key=_SORT_KEYS[parameters.order_by],
            reverse=not parameters.is_ascending,
        )
        page = PaginatedList[Product].from_sequence(
            ordered, parameters.page_number, parameters.page_size
        )
        logger.info(
            f"Retrieved page {page.current_page}/{page.total_pages} "
            f"of {page.total_count} products"
        )
        return page

    async def get_product(self, product_id: UUID) -> Product:
        product = await self._products.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundException(product_id)
        return product

    async def _require_references(self, brand_id: UUID | None, category_id: UUID | None) -> None:
        if brand_id is not None and not await self._brands.exists(brand_id):
            raise BrandNotFoundException(brand_id, field="brand_id")
        if category_id is not None and not await self._categories.exists(category_id):
            raise CategoryNotFoundException(category_id, field="category_id")

    async def create_product(
        self,
        name: str,
        description: str,
        price: Decimal,
        sku: str,
        discount: Decimal = Decimal("0"),
        stock: int = 0,
        availability: bool = True,
        brand_id: UUID | None = None,
        category_id: UUID | None = None,
    ) -> Product:
        await self._require_references(brand_id, category_id)
        product = Product.create(
            name=name,
            description=description,
            price=price,
            sku=sku,
            discount=discount,
            stock=stock,
            availability=availability,
            brand_id=brand_id,
            category_id=category_id,
        )
        if not await self._products.add(product):
            logger.error("Conflict occurred while adding the product")
            raise ConflictException(f"Product {product.id} could not be added")
        logger.info(f"Product {product.id} added")
        return product

    async def update_product(
        self,
        product_id: UUID,
        name: str,
        description: str,
        price: Decimal,
        sku: str,
        discount: Decimal,
        stock: int,
        availability: bool,
        brand_id: UUID | None,
        category_id: UUID | None,
    ) -> Product:
        await self._require_references(brand_id, category_id)
        product = await self.get_product(product_id)
        product.update(
            brand_id=brand_id,
            category_id=category_id,
            name=name,
            description=description,
            price=price,
            discount=discount,
            sku=sku,
            stock=stock,
            availability=availability,
        )
        if not await self._products.update(product):
            logger.error(f"Conflict occurred while updating product {product_id}")
            raise ConflictException(f"Product {product_id} could not be updated")
        logger.info(f"Product {product_id} updated")
        return product

    async def delete_product(self, product_id: UUID) -> None:
        """Delete a product and announce it.

        Raises:
            ProductNotFoundException: If the product does not exist
            ConflictException: If the store refused the delete
        """
        if not await self._products.exists(product_id):
            raise ProductNotFoundException(product_id)
        if not await self._products.remove_by_id(product_id):
            logger.error(f"Conflict occurred while deleting product {product_id}")
            raise ConflictException(f"Product {product_id} could not be deleted")

        await self._event_publisher.publish(ProductDeletedEvent(product_id=product_id))
        logger.info(f"Product {product_id} deleted")
