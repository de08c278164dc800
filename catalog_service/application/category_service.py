"""Application service for categories."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from ..domain.entities import Category
from ..domain.exceptions import CategoryNotFoundException, ConflictException
from .image_validation import validate_image

if TYPE_CHECKING:
    from ..ports.blob_storage import BlobStoragePort
    from ..ports.repositories import CategoryRepositoryPort

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for managing the category tree and category images."""

    def __init__(
        self,
        repository: CategoryRepositoryPort,
        blob_storage: BlobStoragePort,
        image_bucket: str,
        default_image_name: str,
    ):
        self._repository = repository
        self._blob_storage = blob_storage
        self._image_bucket = image_bucket
        self._default_image_name = default_image_name

    async def list_categories(self) -> list[Category]:
        categories = await self._repository.get_all()
        logger.info(f"Retrieved {len(categories)} categories")
        return categories

    async def get_category(self, category_id: UUID) -> Category:
        category = await self._repository.get_by_id(category_id)
        if category is None:
            raise CategoryNotFoundException(category_id)
        return category

    async def list_subcategories(self, parent_category_id: UUID) -> list[Category]:
        """List direct children of an existing category.

        Raises:
            CategoryNotFoundException: If the parent category does not exist
        """
        if not await self._repository.exists(parent_category_id):
            raise CategoryNotFoundException(parent_category_id)
        return await self._repository.get_subcategories_by_parent_id(parent_category_id)

    async def _require_parent(self, parent_category_id: UUID | None) -> None:
        if parent_category_id is not None and not await self._repository.exists(
            parent_category_id
        ):
            raise CategoryNotFoundException(parent_category_id, field="parent_category_id")

    async def create_category(
        self,
        name: str,
        description: str,
        parent_category_id: UUID | None = None,
        display_order: int = 0,
    ) -> Category:
        await self._require_parent(parent_category_id)
        category = Category.create(
            name=name,
            description=description,
            parent_category_id=parent_category_id,
            image_file_name=self._default_image_name,
            display_order=display_order,
        )
        if not await self._repository.add(category):
            logger.error("Conflict occurred while adding the category")
            raise ConflictException(f"Category {category.id} could not be added")
        logger.info(f"Category {category.id} added")
        return category

    async def update_category(
        self,
        category_id: UUID,
        name: str,
        description: str,
        parent_category_id: UUID | None,
        display_order: int,
    ) -> Category:
        category = await self.get_category(category_id)
        await self._require_parent(parent_category_id)
        category.update(
            parent_category_id=parent_category_id,
            name=name,
            description=description,
            image_file_name=category.image_file_name,
            display_order=display_order,
        )
        if not await self._repository.update(category):
            logger.error(f"Conflict occurred while updating category {category_id}")
            raise ConflictException(f"Category {category_id} could not be updated")
        logger.info(f"Category {category_id} updated")
        return category

    async def delete_category(self, category_id: UUID) -> None:
        category = await self.get_category(category_id)
        if not await self._repository.remove_by_id(category_id):
            logger.error(f"Conflict occurred while deleting category {category_id}")
            raise ConflictException(f"Category {category_id} could not be deleted")
        await self._delete_uploaded_image(category.image_file_name)
        logger.info(f"Category {category_id} deleted")

    async def set_category_image(
        self, category_id: UUID, data: bytes, content_type: str | None
    ) -> Category:
        media_type = validate_image(data, content_type)
        category = await self.get_category(category_id)
        previous = category.image_file_name

        object_id = await self._blob_storage.upload(self._image_bucket, data, media_type)
        category.update(
            parent_category_id=category.parent_category_id,
            name=category.name,
            description=category.description,
            image_file_name=object_id,
            display_order=category.display_order,
        )
        if not await self._repository.update(category):
            await self._blob_storage.delete(self._image_bucket, object_id)
            raise ConflictException(f"Image of category {category_id} could not be updated")

        await self._delete_uploaded_image(previous)
        logger.info(f"Image of category {category_id} set to {object_id}")
        return category

    async def remove_category_image(self, category_id: UUID) -> Category:
        category = await self.get_category(category_id)
        previous = category.image_file_name
        if previous == self._default_image_name:
            return category

        category.update(
            parent_category_id=category.parent_category_id,
            name=category.name,
            description=category.description,
            image_file_name=self._default_image_name,
            display_order=category.display_order,
        )
        if not await self._repository.update(category):
            raise ConflictException(f"Image of category {category_id} could not be removed")

        await self._delete_uploaded_image(previous)
        logger.info(f"Image of category {category_id} reset to default")
        return category

    async def _delete_uploaded_image(self, image_file_name: str | None) -> None:
        if image_file_name and image_file_name != self._default_image_name:
            await self._blob_storage.delete(self._image_bucket, image_file_name)
