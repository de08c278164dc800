"""Catalog entities.

Entities are frozen pydantic models: attribute assignment from outside is
rejected, and the only ways to change state are ``create`` (new id) and the
entity's ``update`` method, which validates the full new field set before
applying it in place.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

SKU_LENGTH = 10

_SLUG_SEPARATOR = re.compile(r"[^a-z0-9]+")


def make_slug(name: str, sku: str) -> str:
    """Build the URL slug for a product from its name and SKU."""
    raw = f"{name} {sku}".lower()
    return _SLUG_SEPARATOR.sub("-", raw).strip("-")


class CatalogEntity(BaseModel):
    """Base for catalog entities with a generated identifier."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
    )

    id: UUID = Field(default_factory=uuid4)

    def _apply(self, **changes: Any) -> None:
        """Validate ``changes`` against the whole entity, then mutate in place.

        Raises:
            pydantic.ValidationError: If the resulting entity is invalid. The
                entity is left unchanged.
        """
        candidate = type(self).model_validate({**self.model_dump(), **changes})
        # frozen only guards __setattr__
        self.__dict__.update(candidate.__dict__)


class Brand(CatalogEntity):
    """A product brand."""

    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=1000)
    image_file_name: str | None = Field(default=None)
    display_order: int = Field(default=0, ge=0)

    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        image_file_name: str | None = None,
        display_order: int = 0,
    ) -> Self:
        return cls(
            name=name,
            description=description,
            image_file_name=image_file_name,
            display_order=display_order,
        )

    def update(
        self,
        name: str,
        description: str,
        image_file_name: str | None,
        display_order: int,
    ) -> None:
        self._apply(
            name=name,
            description=description,
            image_file_name=image_file_name,
            display_order=display_order,
        )


class Category(CatalogEntity):
    """A node in the category tree. Roots have no parent."""

    parent_category_id: UUID | None = Field(default=None)
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=1000)
    image_file_name: str | None = Field(default=None)
    display_order: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _not_own_parent(self) -> Category:
        if self.parent_category_id is not None and self.parent_category_id == self.id:
            raise ValueError("A category cannot be its own parent")
        return self

    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        parent_category_id: UUID | None = None,
        image_file_name: str | None = None,
        display_order: int = 0,
    ) -> Self:
        return cls(
            parent_category_id=parent_category_id,
            name=name,
            description=description,
            image_file_name=image_file_name,
            display_order=display_order,
        )

    def update(
        self,
        parent_category_id: UUID | None,
        name: str,
        description: str,
        image_file_name: str | None,
        display_order: int,
    ) -> None:
        self._apply(
            parent_category_id=parent_category_id,
            name=name,
            description=description,
            image_file_name=image_file_name,
            display_order=display_order,
        )


class ProductImage(CatalogEntity):
    """An image attached to exactly one product."""

    product_id: UUID
    image_file_name: str = Field(..., min_length=1)
    display_order: int = Field(default=0, ge=0)

    @classmethod
    def create(cls, product_id: UUID, image_file_name: str, display_order: int) -> Self:
        return cls(
            product_id=product_id,
            image_file_name=image_file_name,
            display_order=display_order,
        )

    def update(self, display_order: int) -> None:
        self._apply(display_order=display_order)


class Product(CatalogEntity):
    """A sellable product.

    ``slug`` is derived from name and SKU on every create and update; any
    supplied value is overwritten. ``images`` is a read-side projection
    filled by the store and is not owned by the product.
    """

    brand_id: UUID | None = Field(default=None)
    category_id: UUID | None = Field(default=None)
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=1000)
    price: Decimal = Field(..., ge=0)
    discount: Decimal = Field(default=Decimal("0"), ge=0, le=1)
    sku: str = Field(..., min_length=SKU_LENGTH, max_length=SKU_LENGTH)
    stock: int = Field(default=0, ge=0)
    availability: bool = Field(default=True)
    slug: str = Field(default="")
    images: list[ProductImage] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _derive_slug(cls, data: Any) -> Any:
        if isinstance(data, dict):
            name, sku = data.get("name"), data.get("sku")
            if isinstance(name, str) and isinstance(sku, str):
                data = {**data, "slug": make_slug(name.strip(), sku.strip())}
        return data

    @property
    def discounted_price(self) -> Decimal:
        return self.price * (Decimal("1") - self.discount)

    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        price: Decimal,
        sku: str,
        discount: Decimal = Decimal("0"),
        stock: int = 0,
        availability: bool = True,
        brand_id: UUID | None = None,
        category_id: UUID | None = None,
    ) -> Self:
        return cls(
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

    def update(
        self,
        brand_id: UUID | None,
        category_id: UUID | None,
        name: str,
        description: str,
        price: Decimal,
        discount: Decimal,
        sku: str,
        stock: int,
        availability: bool,
    ) -> None:
        self._apply(
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
