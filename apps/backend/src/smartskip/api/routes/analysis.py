"""Analysis endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from smartskip.api.deps import get_orchestrator, get_settings
from smartskip.api.schemas import AnalysisRequest, AnalysisResponse
from smartskip.config import Settings
from smartskip.errors import (
    AnalysisError,
    AnalysisInProgressError,
    ClassifierError,
    ClassifierTimeoutError,
    SmartSkipError,
    StorageError,
    ValidationError,
)
from smartskip.models.transcript import Transcript
from smartskip.services.orchestrator import AnalysisOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["analysis"])


def status_for(error: SmartSkipError) -> int:
    """Map a SmartSkip error to an HTTP status code."""
    if isinstance(error, AnalysisError) and isinstance(error.cause, SmartSkipError):
        return status_for(error.cause)
    if isinstance(error, AnalysisInProgressError):
        return 409
    if isinstance(error, ValidationError):
        return 422
    if isinstance(error, ClassifierTimeoutError):
        return 504
    if isinstance(error, ClassifierError):
        return 502
    if isinstance(error, StorageError):
        return 503
    return 500


@router.post("/analysis", response_model=AnalysisResponse)
async def analyze_video(
    req: AnalysisRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
) -> AnalysisResponse:
    transcript = Transcript(video_id=req.video_id, lines=req.transcript)
    preferences = req.preferences or settings.default_preferences()
    try:
        result = await orchestrator.analyze(transcript, preferences)
    except SmartSkipError as exc:
        raise HTTPException(status_code=status_for(exc), detail=exc.user_message) from exc
    return AnalysisResponse.from_result(result)
