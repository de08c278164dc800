"""Request and response DTOs for the HTTP API.

Read models are built straight from entities (``from_attributes``); write
models mirror the entity validation rules so bad input is rejected before
it reaches a service.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BrandWrite(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=1000)
    display_order: int = Field(default=0, ge=0)


class BrandRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    image_file_name: str | None
    display_order: int


class CategoryWrite(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=1000)
    parent_category_id: UUID | None = Field(default=None)
    display_order: int = Field(default=0, ge=0)


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    parent_category_id: UUID | None
    name: str
    description: str
    image_file_name: str | None
    display_order: int


class ProductImageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    image_file_name: str
    display_order: int


class ProductImageOrderUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    display_order: int = Field(..., ge=0)


class ProductWrite(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=1000)
    price: Decimal = Field(..., ge=0)
    discount: Decimal = Field(default=Decimal("0"), ge=0, le=1)
    sku: str = Field(..., min_length=10, max_length=10)
    stock: int = Field(default=0, ge=0)
    availability: bool = Field(default=True)
    brand_id: UUID | None = Field(default=None)
    category_id: UUID | None = Field(default=None)


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    brand_id: UUID | None
    category_id: UUID | None
    name: str
    description: str
    price: Decimal
    discount: Decimal
    discounted_price: Decimal
    sku: str
    slug: str
    stock: int
    availability: bool
    images: list[ProductImageRead]


class ProductPage(BaseModel):
    """A page of products plus paging metadata."""

    items: list[ProductRead]
    current_page: int
    total_pages: int
    page_size: int
    total_count: int


class HealthResponse(BaseModel):
    """API response model for health endpoint."""

    status: str
    service: str
    version: str
    environment: str
    cache: dict[str, Any]
    cache_stats: dict[str, Any]
    metrics: dict[str, Any]
