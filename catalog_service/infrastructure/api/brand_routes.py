"""API routes for brands."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status

from ...application.brand_service import BrandService
from .dependencies import get_brand_service
from .schemas import BrandRead, BrandWrite

router = APIRouter(prefix="/api/v1/brands", tags=["Brands"])


@router.get("", response_model=list[BrandRead])
async def list_brands(
    brand_service: BrandService = Depends(get_brand_service),  # noqa: B008
) -> list[BrandRead]:
    """List all brands."""
    brands = await brand_service.list_brands()
    return [BrandRead.model_validate(brand) for brand in brands]


@router.get("/{brand_id}", response_model=BrandRead)
async def get_brand(
    brand_id: UUID,
    brand_service: BrandService = Depends(get_brand_service),  # noqa: B008
) -> BrandRead:
    """Get a brand by id."""
    return BrandRead.model_validate(await brand_service.get_brand(brand_id))


@router.post("", response_model=BrandRead, status_code=status.HTTP_201_CREATED)
async def create_brand(
    request: BrandWrite,
    brand_service: BrandService = Depends(get_brand_service),  # noqa: B008
) -> BrandRead:
    """Create a brand with the default image."""
    brand = await brand_service.create_brand(
        name=request.name,
        description=request.description,
        display_order=request.display_order,
    )
    return BrandRead.model_validate(brand)


@router.put("/{brand_id}", response_model=BrandRead)
async def update_brand(
    brand_id: UUID,
    request: BrandWrite,
    brand_service: BrandService = Depends(get_brand_service),  # noqa: B008
) -> BrandRead:
    brand = await brand_service.update_brand(
        brand_id,
        name=request.name,
        description=request.description,
        display_order=request.display_order,
    )
    return BrandRead.model_validate(brand)


@router.delete("/{brand_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_brand(
    brand_id: UUID,
    brand_service: BrandService = Depends(get_brand_service),  # noqa: B008
) -> Response:
    await brand_service.delete_brand(brand_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{brand_id}/image", response_model=BrandRead)
async def set_brand_image(
    brand_id: UUID,
    http_request: Request,
    brand_service: BrandService = Depends(get_brand_service),  # noqa: B008
) -> BrandRead:
    """Replace the brand image with the raw request body."""
    data = await http_request.body()
    brand = await brand_service.set_brand_image(
        brand_id, data, http_request.headers.get("content-type")
    )
    return BrandRead.model_validate(brand)


@router.delete("/{brand_id}/image", response_model=BrandRead)
async def remove_brand_image(
    brand_id: UUID,
    brand_service: BrandService = Depends(get_brand_service),  # noqa: B008
) -> BrandRead:
    """Reset the brand to the default image."""
    return BrandRead.model_validate(await brand_service.remove_brand_image(brand_id))
