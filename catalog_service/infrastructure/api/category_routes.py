"""API routes for categories."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status

from ...application.category_service import CategoryService
from .dependencies import get_category_service
from .schemas import CategoryRead, CategoryWrite

router = APIRouter(prefix="/api/v1/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryRead])
async def list_categories(
    category_service: CategoryService = Depends(get_category_service),  # noqa: B008
) -> list[CategoryRead]:
    categories = await category_service.list_categories()
    return [CategoryRead.model_validate(category) for category in categories]


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(
    category_id: UUID,
    category_service: CategoryService = Depends(get_category_service),  # noqa: B008
) -> CategoryRead:
    return CategoryRead.model_validate(await category_service.get_category(category_id))


@router.get("/{category_id}/subcategories", response_model=list[CategoryRead])
async def list_subcategories(
    category_id: UUID,
    category_service: CategoryService = Depends(get_category_service),  # noqa: B008
) -> list[CategoryRead]:
    """List the direct children of a category."""
    categories = await category_service.list_subcategories(category_id)
    return [CategoryRead.model_validate(category) for category in categories]


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CategoryWrite,
    category_service: CategoryService = Depends(get_category_service),  # noqa: B008
) -> CategoryRead:
    category = await category_service.create_category(
        name=request.name,
        description=request.description,
        parent_category_id=request.parent_category_id,
        display_order=request.display_order,
    )
    return CategoryRead.model_validate(category)


@router.put("/{category_id}", response_model=CategoryRead)
async def update_category(
    category_id: UUID,
    request: CategoryWrite,
    category_service: CategoryService = Depends(get_category_service),  # noqa: B008
) -> CategoryRead:
    category = await category_service.update_category(
        category_id,
        name=request.name,
        description=request.description,
        parent_category_id=request.parent_category_id,
        display_order=request.display_order,
    )
    return CategoryRead.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    category_service: CategoryService = Depends(get_category_service),  # noqa: B008
) -> Response:
    await category_service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{category_id}/image", response_model=CategoryRead)
async def set_category_image(
    category_id: UUID,
    http_request: Request,
    category_service: CategoryService = Depends(get_category_service),  # noqa: B008
) -> CategoryRead:
    data = await http_request.body()
    category = await category_service.set_category_image(
        category_id, data, http_request.headers.get("content-type")
    )
    return CategoryRead.model_validate(category)


@router.delete("/{category_id}/image", response_model=CategoryRead)
async def remove_category_image(
    category_id: UUID,
    category_service: CategoryService = Depends(get_category_service),  # noqa: B008
) -> CategoryRead:
    return CategoryRead.model_validate(await category_service.remove_category_image(category_id))
