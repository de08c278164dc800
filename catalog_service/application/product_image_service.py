"""Application service for product images."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from ..domain.entities import ProductImage
from ..domain.exceptions import (
    ConflictException,
    ImageLimitExceededException,
    ImageOwnershipException,
    ProductImageNotFoundException,
    ProductNotFoundException,
)
from .image_validation import validate_image

if TYPE_CHECKING:
    from ..ports.blob_storage import BlobStoragePort
    from ..ports.repositories import ProductImageRepositoryPort, ProductRepositoryPort

logger = logging.getLogger(__name__)


def _renumber(images: list[ProductImage]) -> list[ProductImage]:
    """Assign display orders 0..n-1 following list position."""
    for position, image in enumerate(images):
        image.update(display_order=position)
    return images


class ProductImageService:
    """Service for the ordered image gallery of a product.

    Display orders of a product's images are kept dense: every add,
    reorder and delete leaves them numbered ``0..n-1``.
    """

    def __init__(
        self,
        images: ProductImageRepositoryPort,
        products: ProductRepositoryPort,
        blob_storage: BlobStoragePort,
        image_bucket: str,
        max_product_images: int,
    ):
        self._images = images
        self._products = products
        self._blob_storage = blob_storage
        self._image_bucket = image_bucket
        self._max_product_images = max_product_images

    async def _require_product(self, product_id: UUID) -> None:
        if not await self._products.exists(product_id):
            raise ProductNotFoundException(product_id)

    async def _owned_image(self, product_id: UUID, image_id: UUID) -> ProductImage:
        image = await self._images.get_by_id(image_id)
        if image is None:
            raise ProductImageNotFoundException(image_id)
        if image.product_id != product_id:
            raise ImageOwnershipException(image_id, product_id)
        return image

    async def list_images(self, product_id: UUID) -> list[ProductImage]:
        await self._require_product(product_id)
        return await self._images.get_all_by_product_id(product_id)

    async def get_image(self, product_id: UUID, image_id: UUID) -> ProductImage:
        """Get an image of a product.

        Raises:
            ProductNotFoundException: If the product does not exist
            ProductImageNotFoundException: If the image does not exist
            ImageOwnershipException: If the image belongs to another product
        """
        await self._require_product(product_id)
        return await self._owned_image(product_id, image_id)

    async def add_image(
        self, product_id: UUID, data: bytes, content_type: str | None
    ) -> ProductImage:
        """Upload an image and append it to the product's gallery.

        Raises:
            InvalidImageException: If the payload is not an acceptable image
            ProductNotFoundException: If the product does not exist
            ImageLimitExceededException: If the gallery is full
            ConflictException: If the store refused the new image
        """
        media_type = validate_image(data, content_type)
        await self._require_product(product_id)

        image_count = await self._images.get_product_image_count(product_id)
        if image_count >= self._max_product_images:
            logger.info(
                f"Product {product_id} already has the maximum of "
                f"{self._max_product_images} images"
            )
            raise ImageLimitExceededException(product_id, self._max_product_images)

        object_id = await self._blob_storage.upload(self._image_bucket, data, media_type)
        image = ProductImage.create(
            product_id=product_id, image_file_name=object_id, display_order=image_count
        )
        if not await self._images.add(image):
            await self._blob_storage.delete(self._image_bucket, object_id)
            logger.error(f"Conflict occurred while adding an image to product {product_id}")
            raise ConflictException(f"Image could not be added to product {product_id}")

        logger.info(f"Image {image.id} added to product {product_id}")
        return image

    async def reorder_image(
        self, product_id: UUID, image_id: UUID, display_order: int
    ) -> list[ProductImage]:
        """Move an image to ``display_order`` and renumber the gallery.

        Positions past the end move the image to the last place.

        Returns:
            The product's images in their new order
        """
        image = await self._owned_image(product_id, image_id)
        if image.display_order == display_order:
            return await self._images.get_all_by_product_id(product_id)

        others = [
            other
            for other in await self._images.get_all_by_product_id(product_id)
            if other.id != image.id
        ]
        others.sort(key=lambda other: other.display_order)
        others.insert(min(display_order, len(others)), image)
        ordered = _renumber(others)

        if not await self._images.batch_update(ordered):
            logger.error(f"Conflict occurred while reordering images of product {product_id}")
            raise ConflictException(f"Images of product {product_id} could not be reordered")
        logger.info(f"Image {image_id} of product {product_id} moved to {image.display_order}")
        return ordered

    async def delete_image(self, product_id: UUID, image_id: UUID) -> None:
        """Delete an image, close the gap in the ordering and drop its blob."""
        image = await self._owned_image(product_id, image_id)
        remaining = [
            other
            for other in await self._images.get_all_by_product_id(product_id)
            if other.id != image.id
        ]
        remaining.sort(key=lambda other: other.display_order)
        _renumber(remaining)

        async with self._images.transaction():
            removed = await self._images.remove_by_id(image_id)
            updated = removed and await self._images.batch_update(remaining)
            if not updated:
                logger.error(f"Conflict occurred while deleting image {image_id}")
                raise ConflictException(f"Image {image_id} could not be deleted")

        await self._blob_storage.delete(self._image_bucket, image.image_file_name)
        logger.info(f"Image {image_id} deleted from product {product_id}")
