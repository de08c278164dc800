"""Domain exceptions for the catalog service.

Application-facing errors carry an ``error_code`` that the API layer maps to
an HTTP status. Infrastructure errors carry a ``details`` dict for logging.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID


class DomainException(Exception):
    """Base exception for all domain-related errors."""

    def __init__(self, message: str, error_code: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class EntityNotFoundException(DomainException):
    """Raised when a referenced catalog entity does not exist."""

    entity_type = "Entity"

    def __init__(self, entity_id: UUID, field: str | None = None):
        super().__init__(
            f"{self.entity_type} with ID '{entity_id}' not found",
            f"{self.entity_type.upper()}_NOT_FOUND",
            details={"id": str(entity_id), "field": field or "id"},
        )
        self.entity_id = entity_id


class BrandNotFoundException(EntityNotFoundException):
    entity_type = "Brand"


class CategoryNotFoundException(EntityNotFoundException):
    entity_type = "Category"


class ProductNotFoundException(EntityNotFoundException):
    entity_type = "Product"


class ProductImageNotFoundException(EntityNotFoundException):
    entity_type = "ProductImage"

    def __init__(self, entity_id: UUID, field: str | None = None):
        super().__init__(entity_id, field)
        # PRODUCTIMAGE_NOT_FOUND reads badly
        self.error_code = "PRODUCT_IMAGE_NOT_FOUND"


class ConflictException(DomainException):
    """Raised when the store refuses a write (duplicate id, row vanished)."""

    def __init__(self, message: str):
        super().__init__(message, "CONFLICT")


class ImageOwnershipException(DomainException):
    """Raised when an image is addressed through a product it does not belong to."""

    def __init__(self, image_id: UUID, product_id: UUID):
        super().__init__(
            "The product ID provided does not match the product ID associated with the image",
            "IMAGE_PRODUCT_MISMATCH",
            details={"image_id": str(image_id), "product_id": str(product_id)},
        )


class ImageLimitExceededException(DomainException):
    """Raised when a product already holds the maximum number of images."""

    def __init__(self, product_id: UUID, limit: int):
        super().__init__(
            f"The maximum number of images {limit} for this product has been reached",
            "IMAGE_LIMIT_EXCEEDED",
            details={"product_id": str(product_id), "limit": limit},
        )


class InvalidImageException(DomainException):
    """Raised when an uploaded image payload is rejected."""

    def __init__(self, message: str):
        super().__init__(message, "INVALID_IMAGE")


class ConfigurationException(DomainException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str):
        super().__init__(message, "CONFIGURATION_ERROR")


class StoreException(DomainException):
    """Raised when the authoritative store fails (connectivity, integrity)."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(
            message, "STORE_ERROR", details={"operation": operation} if operation else None
        )
        self.operation = operation


class CacheException(DomainException):
    """Raised when the cache layer fails and is configured to fail closed."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message, "CACHE_ERROR", details={"key": key} if key else None)
        self.key = key


class BlobStorageException(DomainException):
    """Raised when the blob storage rejects an upload or delete."""

    def __init__(self, message: str, bucket: str | None = None):
        super().__init__(
            message, "BLOB_STORAGE_ERROR", details={"bucket": bucket} if bucket else None
        )


class CacheBackendError(Exception):
    """Low-level cache backend failure (connectivity, protocol)."""

    def __init__(self, message: str, key: str | None = None, operation: str | None = None):
        super().__init__(message)
        self.message = message
        self.key = key
        self.operation = operation
        self.details: dict[str, Any] = {}
        if key:
            self.details["key"] = key
        if operation:
            self.details["operation"] = operation


class SerializationError(Exception):
    """Cached payload could not be encoded or decoded."""

    pass


class EventPublishException(DomainException):
    """Raised when a domain event could not be delivered."""

    def __init__(self, message: str, subject: str | None = None):
        super().__init__(
            message, "EVENT_PUBLISH_ERROR", details={"subject": subject} if subject else None
        )
