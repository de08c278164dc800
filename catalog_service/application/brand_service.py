"""Application service for brands."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from ..domain.entities import Brand
from ..domain.exceptions import BrandNotFoundException, ConflictException
from .image_validation import validate_image

if TYPE_CHECKING:
    from ..ports.blob_storage import BlobStoragePort
    from ..ports.repositories import BrandRepositoryPort

logger = logging.getLogger(__name__)


class BrandService:
    """Service for managing brands and their images."""

    def __init__(
        self,
        repository: BrandRepositoryPort,
        blob_storage: BlobStoragePort,
        image_bucket: str,
        default_image_name: str,
    ):
        """Initialize the brand service.

        Args:
            repository: The brand repository
            blob_storage: Storage for brand images
            image_bucket: Bucket holding brand images
            default_image_name: Image assigned to brands without an upload
        """
        self._repository = repository
        self._blob_storage = blob_storage
        self._image_bucket = image_bucket
        self._default_image_name = default_image_name

    async def list_brands(self) -> list[Brand]:
        brands = await self._repository.get_all()
        logger.info(f"Retrieved {len(brands)} brands")
        return brands

    async def get_brand(self, brand_id: UUID) -> Brand:
        """Get a brand by id.

        Raises:
            BrandNotFoundException: If the brand does not exist
        """
        brand = await self._repository.get_by_id(brand_id)
        if brand is None:
            raise BrandNotFoundException(brand_id)
        return brand

    async def create_brand(self, name: str, description: str, display_order: int = 0) -> Brand:
        brand = Brand.create(
            name=name,
            description=description,
            image_file_name=self._default_image_name,
            display_order=display_order,
        )
        if not await self._repository.add(brand):
            logger.error("Conflict occurred while adding the brand")
            raise ConflictException(f"Brand {brand.id} could not be added")
        logger.info(f"Brand {brand.id} added")
        return brand

    async def update_brand(
        self, brand_id: UUID, name: str, description: str, display_order: int
    ) -> Brand:
        brand = await self.get_brand(brand_id)
        brand.update(
            name=name,
            description=description,
            image_file_name=brand.image_file_name,
            display_order=display_order,
        )
        if not await self._repository.update(brand):
            logger.error(f"Conflict occurred while updating brand {brand_id}")
            raise ConflictException(f"Brand {brand_id} could not be updated")
        logger.info(f"Brand {brand_id} updated")
        return brand

    async def delete_brand(self, brand_id: UUID) -> None:
        brand = await self.get_brand(brand_id)
        if not await self._repository.remove_by_id(brand_id):
            logger.error(f"Conflict occurred while deleting brand {brand_id}")
            raise ConflictException(f"Brand {brand_id} could not be deleted")
        await self._delete_uploaded_image(brand.image_file_name)
        logger.info(f"Brand {brand_id} deleted")

    async def set_brand_image(self, brand_id: UUID, data: bytes, content_type: str | None) -> Brand:
        """Upload a new image for the brand, replacing the previous one.

        Raises:
            InvalidImageException: If the payload is not an acceptable image
            BrandNotFoundException: If the brand does not exist
            ConflictException: If the store refused the update
        """
        media_type = validate_image(data, content_type)
        brand = await self.get_brand(brand_id)
        previous = brand.image_file_name

        object_id = await self._blob_storage.upload(self._image_bucket, data, media_type)
        brand.update(
            name=brand.name,
            description=brand.description,
            image_file_name=object_id,
            display_order=brand.display_order,
        )
        if not await self._repository.update(brand):
            await self._blob_storage.delete(self._image_bucket, object_id)
            raise ConflictException(f"Image of brand {brand_id} could not be updated")

        await self._delete_uploaded_image(previous)
        logger.info(f"Image of brand {brand_id} set to {object_id}")
        return brand

    async def remove_brand_image(self, brand_id: UUID) -> Brand:
        """Reset the brand to the default image."""
        brand = await self.get_brand(brand_id)
        previous = brand.image_file_name
        if previous == self._default_image_name:
            return brand

        brand.update(
            name=brand.name,
            description=brand.description,
            image_file_name=self._default_image_name,
            display_order=brand.display_order,
        )
        if not await self._repository.update(brand):
            raise ConflictException(f"Image of brand {brand_id} could not be removed")

        await self._delete_uploaded_image(previous)
        logger.info(f"Image of brand {brand_id} reset to default")
        return brand

    async def _delete_uploaded_image(self, image_file_name: str | None) -> None:
        if image_file_name and image_file_name != self._default_image_name:
            await self._blob_storage.delete(self._image_bucket, image_file_name)
