"""Events emitted to UI and analytics collaborators."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from smartskip.models.analysis import AnalysisResult, AnalysisStage
from smartskip.models.segment import Segment


class SkipEvent(BaseModel):
    """Base event."""

    video_id: str = Field(..., description="Video the event refers to")
    emitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AnalysisStarted(SkipEvent):
    kind: Literal["analysis_started"] = "analysis_started"


class AnalysisCompleted(SkipEvent):
    kind: Literal["analysis_completed"] = "analysis_completed"
    result: AnalysisResult
    from_cache: bool = False


class AnalysisFailed(SkipEvent):
    kind: Literal["analysis_failed"] = "analysis_failed"
    stage: AnalysisStage
    message: str = Field(..., description="User-facing failure message")
    error_type: str = Field(..., description="Exception class name")


class PreviewStarted(SkipEvent):
    kind: Literal["preview_started"] = "preview_started"
    segment: Segment
    buffer_seconds: float


class PreviewCancelled(SkipEvent):
    kind: Literal["preview_cancelled"] = "preview_cancelled"
    segment: Segment


class SegmentSkipped(SkipEvent):
    kind: Literal["segment_skipped"] = "segment_skipped"
    segment: Segment
    manual: bool = False

    @property
    def category(self) -> str:
        return self.segment.category

    @property
    def duration(self) -> float:
        return self.segment.duration
