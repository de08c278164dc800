"""Cache key naming scheme.

Keys are part of the shared cache's de facto contract and must be identical
for identical logical queries across processes and restarts:

- ``{EntityType}_{id}`` for single entities
- ``{EntityType}_All`` for full collections
- ``{EntityType}_{Relation}_{relatedId}`` for relationship-scoped lists

A missing related id (e.g. the parent of a root category) renders as ``Root``.
"""

from __future__ import annotations

from uuid import UUID

ROOT_MARKER = "Root"


class CacheKeys:
    """Key builder scoped to one entity type."""

    def __init__(self, entity_type: str):
        if not entity_type or not entity_type.isalnum():
            raise ValueError(f"Invalid entity type for cache keys: {entity_type!r}")
        self.entity_type = entity_type

    @property
    def all(self) -> str:
        return f"{self.entity_type}_All"

    def item(self, entity_id: UUID) -> str:
        return f"{self.entity_type}_{entity_id}"

    def relation(self, relation: str, related_id: UUID | None) -> str:
        scope = ROOT_MARKER if related_id is None else str(related_id)
        return f"{self.entity_type}_{relation}_{scope}"

    def __repr__(self) -> str:
        return f"CacheKeys({self.entity_type!r})"


BRAND_KEYS = CacheKeys("Brand")
CATEGORY_KEYS = CacheKeys("Category")
PRODUCT_KEYS = CacheKeys("Product")
PRODUCT_IMAGE_KEYS = CacheKeys("ProductImage")


def subcategories_key(parent_category_id: UUID | None) -> str:
    return CATEGORY_KEYS.relation("Sub", parent_category_id)


def product_images_key(product_id: UUID) -> str:
    return PRODUCT_IMAGE_KEYS.relation("All", product_id)


def entity_type_of(key: str) -> str:
    """Entity type prefix of a key, used to label diagnostics."""
    return key.split("_", 1)[0]
