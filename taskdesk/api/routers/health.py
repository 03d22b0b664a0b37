"""
Health check API endpoints.

Routes: GET /ai/health

Dependencies: taskdesk.application.services.health_service
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends

from taskdesk.api.deps import get_health_service
from taskdesk.application.services.health_service import HealthService
from taskdesk.models.health import AIHealthResponse

router = APIRouter(prefix="/ai", tags=["health"])


@router.get("/health", response_model=AIHealthResponse)
async def ai_health(
    health_service: HealthService = Depends(get_health_service),
) -> AIHealthResponse:
    """Liveness of the relational store and the history cache."""
    return await health_service.check()
