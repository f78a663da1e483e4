"""Health check endpoint."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from smartskip import __version__
from smartskip.api.deps import get_orchestrator
from smartskip.services.orchestrator import AnalysisOrchestrator

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str
    provider: str
    classifier_available: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)) -> HealthResponse:
    """Report service health and whether the classifier has a usable key."""
    provider = orchestrator.client.provider
    return HealthResponse(
        status="healthy" if provider.is_available else "degraded",
        version=__version__,
        provider=provider.name,
        classifier_available=provider.is_available,
    )
