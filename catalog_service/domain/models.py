"""Domain value objects and configuration models for the catalog service."""

from __future__ import annotations

import math
from enum import Enum
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class IsolationLevel(str, Enum):
    """Transaction isolation levels a store unit of work can request."""

    READ_UNCOMMITTED = "READ_UNCOMMITTED"
    READ_COMMITTED = "READ_COMMITTED"
    REPEATABLE_READ = "REPEATABLE_READ"
    SERIALIZABLE = "SERIALIZABLE"


class ProductOrderBy(str, Enum):
    NAME = "name"
    PRICE = "price"
    DISCOUNT = "discount"


class ProductQueryParameters(BaseModel):
    """Paging and ordering for product listings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)
    order_by: ProductOrderBy = Field(default=ProductOrderBy.NAME)
    is_ascending: bool = Field(default=True)


class PaginatedList(BaseModel, Generic[T]):
    """One page of a larger, ordered result set."""

    items: list[T]
    current_page: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)
    page_size: int = Field(..., ge=1)
    total_count: int = Field(..., ge=0)

    @classmethod
    def from_sequence(cls, items: list[T], page_number: int, page_size: int) -> PaginatedList[T]:
        """Slice a fully ordered list into the requested page."""
        total_count = len(items)
        start = (page_number - 1) * page_size
        return cls(
            items=items[start : start + page_size],
            current_page=page_number,
            total_pages=math.ceil(total_count / page_size),
            page_size=page_size,
            total_count=total_count,
        )


class CatalogConfiguration(BaseModel):
    """Service configuration loaded at startup."""

    model_config = ConfigDict(strict=True, frozen=True)

    nats_url: str = Field(default="nats://localhost:4222")
    api_port: int = Field(default=8000, ge=1, le=65535)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    environment: Literal["development", "staging", "production"] = Field(default="development")

    cache_backend: Literal["nats", "memory"] = Field(default="nats")
    cache_bucket: str = Field(default="catalog_cache", pattern=r"^[a-zA-Z0-9_-]+$")
    cache_ttl_seconds: float = Field(default=300.0, gt=0)
    cache_fail_open: bool = Field(default=True)

    blob_backend: Literal["nats", "memory"] = Field(default="nats")
    brand_image_bucket: str = Field(default="brand-images", min_length=1)
    category_image_bucket: str = Field(default="category-images", min_length=1)
    product_image_bucket: str = Field(default="product-images", min_length=1)

    max_product_images: int = Field(default=10, ge=1)
    default_brand_image_name: str = Field(default="default-brand.png", min_length=1)
    default_category_image_name: str = Field(default="default-category.png", min_length=1)

    product_deleted_subject: str = Field(default="catalog.product.deleted", min_length=1)

    @field_validator("nats_url")
    @classmethod
    def validate_nats_url(cls, v: str) -> str:
        """Validate NATS URL format."""
        if not v.startswith(("nats://", "tls://")):
            raise ValueError("NATS URL must start with nats:// or tls://")
        return v

    @property
    def uses_nats(self) -> bool:
        return self.cache_backend == "nats" or self.blob_backend == "nats"
