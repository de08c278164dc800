"""Health endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ... import __version__
from ..connection_manager import ConnectionManager
from .dependencies import get_manager
from .schemas import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    manager: ConnectionManager = Depends(get_manager),  # noqa: B008
) -> HealthResponse:
    """Health check reporting cache backend reachability and cache statistics."""
    cache = await manager.check_cache_backend()
    return HealthResponse(
        status="healthy" if cache["status"] == "healthy" else "degraded",
        service="catalog-service",
        version=__version__,
        environment=manager.config.environment,
        cache=cache,
        cache_stats=manager.cache_manager.get_cache_stats(),
        metrics=manager.metrics.get_all(),
    )
