"""Request and response schemas for the SmartSkip API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from smartskip.models.analysis import AnalysisResult
from smartskip.models.preferences import SkipPreferences
from smartskip.models.segment import Segment
from smartskip.models.transcript import TranscriptLine


class AnalysisRequest(BaseModel):
    video_id: str = Field(..., min_length=1, description="Video identifier")
    transcript: list[TranscriptLine] = Field(default_factory=list, description="Timed caption lines")
    preferences: SkipPreferences | None = Field(None, description="User preferences (server defaults if omitted)")


class AnalysisResponse(BaseModel):
    video_id: str
    segments: list[Segment] = Field(default_factory=list)
    total_skip_duration: float = 0.0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: AnalysisResult) -> AnalysisResponse:
        return cls(
            video_id=result.video_id,
            segments=result.segments,
            total_skip_duration=result.total_skip_duration,
            metadata=result.metadata.model_dump(mode="json", by_alias=True, exclude_none=True),
        )


class SweepRequest(BaseModel):
    max_age_days: int | None = Field(None, ge=0, description="Override the configured max age")


class SweepResponse(BaseModel):
    deleted: int


class InvalidateResponse(BaseModel):
    video_id: str
    invalidated: bool = True
