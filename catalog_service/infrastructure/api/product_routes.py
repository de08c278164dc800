"""API routes for products and their images."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from ...application.product_image_service import ProductImageService
from ...application.product_service import ProductService
from ...domain.models import ProductOrderBy, ProductQueryParameters
from .dependencies import get_product_image_service, get_product_service
from .schemas import (
    ProductImageOrderUpdate,
    ProductImageRead,
    ProductPage,
    ProductRead,
    ProductWrite,
)

router = APIRouter(prefix="/api/v1/products", tags=["Products"])


@router.get("", response_model=ProductPage)
async def list_products(
    page_number: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    order_by: ProductOrderBy = Query(ProductOrderBy.NAME),
    is_ascending: bool = Query(True),
    product_service: ProductService = Depends(get_product_service),  # noqa: B008
) -> ProductPage:
    """List one page of products."""
    parameters = ProductQueryParameters(
        page_number=page_number,
        page_size=page_size,
        order_by=order_by,
        is_ascending=is_ascending,
    )
    page = await product_service.list_products(parameters)
    return ProductPage(
        items=[ProductRead.model_validate(product) for product in page.items],
        current_page=page.current_page,
        total_pages=page.total_pages,
        page_size=page.page_size,
        total_count=page.total_count,
    )


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: UUID,
    product_service: ProductService = Depends(get_product_service),  # noqa: B008
) -> ProductRead:
    return ProductRead.model_validate(await product_service.get_product(product_id))


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: ProductWrite,
    product_service: ProductService = Depends(get_product_service),  # noqa: B008
) -> ProductRead:
    product = await product_service.create_product(**request.model_dump())
    return ProductRead.model_validate(product)


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: UUID,
    request: ProductWrite,
    product_service: ProductService = Depends(get_product_service),  # noqa: B008
) -> ProductRead:
    product = await product_service.update_product(product_id, **request.model_dump())
    return ProductRead.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: UUID,
    product_service: ProductService = Depends(get_product_service),  # noqa: B008
) -> Response:
    """Delete a product and publish ProductDeletedEvent."""
    await product_service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{product_id}/images", response_model=list[ProductImageRead])
async def list_product_images(
    product_id: UUID,
    image_service: ProductImageService = Depends(get_product_image_service),  # noqa: B008
) -> list[ProductImageRead]:
    images = await image_service.list_images(product_id)
    return [ProductImageRead.model_validate(image) for image in images]


@router.post(
    "/{product_id}/images",
    response_model=ProductImageRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_product_image(
    product_id: UUID,
    http_request: Request,
    image_service: ProductImageService = Depends(get_product_image_service),  # noqa: B008
) -> ProductImageRead:
    """Append the raw request body as a new product image."""
    data = await http_request.body()
    image = await image_service.add_image(
        product_id, data, http_request.headers.get("content-type")
    )
    return ProductImageRead.model_validate(image)


@router.get("/{product_id}/images/{image_id}", response_model=ProductImageRead)
async def get_product_image(
    product_id: UUID,
    image_id: UUID,
    image_service: ProductImageService = Depends(get_product_image_service),  # noqa: B008
) -> ProductImageRead:
    return ProductImageRead.model_validate(await image_service.get_image(product_id, image_id))


@router.put("/{product_id}/images/{image_id}", response_model=list[ProductImageRead])
async def reorder_product_image(
    product_id: UUID,
    image_id: UUID,
    request: ProductImageOrderUpdate,
    image_service: ProductImageService = Depends(get_product_image_service),  # noqa: B008
) -> list[ProductImageRead]:
    """Move an image to a new display order; returns the renumbered gallery."""
    images = await image_service.reorder_image(product_id, image_id, request.display_order)
    return [ProductImageRead.model_validate(image) for image in images]


@router.delete("/{product_id}/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product_image(
    product_id: UUID,
    image_id: UUID,
    image_service: ProductImageService = Depends(get_product_image_service),  # noqa: B008
) -> Response:
    await image_service.delete_image(product_id, image_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
