"""Health endpoints."""
from fastapi import APIRouter, Depends

from ..dependencies import get_catalog_service
from ..schemas import HealthStatus
from ..services import CatalogService

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthStatus)
def get_health(service: CatalogService = Depends(get_catalog_service)) -> HealthStatus:
    """Return service heartbeat information."""

    return HealthStatus(cache_entries=len(service.cache))
