"""Router aggregating every API route group."""

from fastapi import APIRouter

from .brand_routes import router as brand_router
from .category_routes import router as category_router
from .health_routes import router as health_router
from .product_routes import router as product_router

router = APIRouter()
router.include_router(health_router)
router.include_router(brand_router)
router.include_router(category_router)
router.include_router(product_router)
