"""
Health check API route
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_health_service
from services.health_service import HealthService

router = APIRouter()


@router.get("/health")
async def health_check(service: HealthService = Depends(get_health_service)):
    """
    Health check - pings the search index and the primary store.
    Responds 503 when either is unreachable.
    """
    return await service.check()
