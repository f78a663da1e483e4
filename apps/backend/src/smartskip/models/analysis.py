"""Analysis result models."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from smartskip.errors import ValidationError
from smartskip.models.segment import (
    Segment,
    filter_by_confidence,
    format_timestamp,
    group_by_category,
    merge_overlapping,
    total_duration,
)

DEFAULT_MAX_AGE = timedelta(days=30)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisStage(str, Enum):
    """Stage of a per-video analysis run."""

    IDLE = "idle"
    CACHE_CHECK = "cache_check"
    CLASSIFYING = "classifying"
    PARSING = "parsing"
    FILTERING = "filtering"
    MERGING = "merging"
    CACHING = "caching"
    DONE = "done"
    FAILED = "failed"


class AnalysisMetadata(BaseModel):
    """Classification metadata. Serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    analyzed_at: datetime = Field(default_factory=_utcnow, description="When the analysis ran")
    model: str = Field(default="unknown", description="Classifier model identifier")
    processing_time_ms: float = Field(default=0.0, ge=0.0, description="Wall time of the run")
    transcript_length: int = Field(default=0, ge=0, description="Transcript length in characters")
    provider: str | None = Field(default=None, description="Classifier provider name")
    source_count: int | None = Field(default=None, description="Number of merged results")
    models: list[str] | None = Field(default=None, description="Models of merged results")

    @field_validator("analyzed_at")
    @classmethod
    def ensure_timezone(cls, value: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class AnalysisResult(BaseModel):
    """Segments detected for one video plus classification metadata.

    Filtering and merging return new results; the metadata (and its
    ``analyzed_at`` timestamp) is carried over unchanged.
    """

    model_config = ConfigDict(frozen=True)

    video_id: str = Field(..., min_length=1, description="Video identifier")
    segments: list[Segment] = Field(default_factory=list, description="Detected segments")
    metadata: AnalysisMetadata = Field(default_factory=AnalysisMetadata)

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    @property
    def total_skip_duration(self) -> float:
        """Total seconds covered by the segments."""
        return total_duration(self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def category_counts(self) -> dict[str, int]:
        return {category: len(items) for category, items in group_by_category(self.segments).items()}

    def _with_segments(self, segments: list[Segment]) -> "AnalysisResult":
        return self.model_copy(update={"segments": segments})

    def filter_by_confidence(self, threshold: float) -> "AnalysisResult":
        """Keep only segments with ``confidence >= threshold``."""
        return self._with_segments(filter_by_confidence(self.segments, threshold))

    def filter_by_enabled_categories(self, predicate: Callable[[str], bool]) -> "AnalysisResult":
        """Keep only segments whose category label satisfies ``predicate``."""
        return self._with_segments([s for s in self.segments if predicate(s.category)])

    def merge_overlapping(self) -> "AnalysisResult":
        return self._with_segments(merge_overlapping(self.segments))

    def age(self, now: datetime | None = None) -> timedelta:
        return (now or _utcnow()) - self.metadata.analyzed_at

    @property
    def age_days(self) -> int:
        return self.age().days

    def is_stale(self, max_age: timedelta = DEFAULT_MAX_AGE, now: datetime | None = None) -> bool:
        """Check whether the result is older than ``max_age``."""
        return self.age(now) > max_age

    def summary(self) -> dict[str, Any]:
        """Return a display-oriented summary of the result."""
        duration = self.total_skip_duration
        return {
            "videoId": self.video_id,
            "segmentCount": self.segment_count,
            "totalDuration": duration,
            "formattedDuration": format_timestamp(duration),
            "categories": self.category_counts,
            "analyzedAt": self.metadata.analyzed_at.isoformat(),
            "model": self.metadata.model,
            "processingTimeMs": self.metadata.processing_time_ms,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the cache wire format."""
        return {
            "videoId": self.video_id,
            "segments": [s.to_dict() for s in self.segments],
            "metadata": self.metadata.model_dump(mode="json", by_alias=True, exclude_none=True),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisResult":
        """Deserialize from the cache wire format.

        Raises:
            ValidationError: If the payload is malformed.
        """
        if not isinstance(data, dict):
            raise ValidationError("Analysis result must be an object", value=data)
        raw_segments = data.get("segments") or []
        if not isinstance(raw_segments, list):
            raise ValidationError("Analysis segments must be a list", field="segments", value=raw_segments)
        segments = [Segment.from_dict(s) for s in raw_segments]
        try:
            metadata = AnalysisMetadata.model_validate(data.get("metadata") or {})
            return cls(video_id=data.get("videoId"), segments=segments, metadata=metadata)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid analysis result: {exc}", value=data) from exc

    @classmethod
    def create_empty(cls, video_id: str, **metadata: Any) -> "AnalysisResult":
        return cls(video_id=video_id, segments=[], metadata=AnalysisMetadata(**metadata))

    @classmethod
    def merge(cls, results: list["AnalysisResult"]) -> "AnalysisResult":
        """Reconcile several results for the same video into one.

        Segment lists are concatenated and merged; the metadata records
        how many results contributed and which models produced them.

        Raises:
            ValidationError: If ``results`` is empty or mixes videos.
        """
        if not results:
            raise ValidationError("Cannot merge an empty list of results")
        video_id = results[0].video_id
        if any(r.video_id != video_id for r in results):
            raise ValidationError("Cannot merge results for different videos", field="video_id")

        segments = merge_overlapping(s for r in results for s in r.segments)
        models = [r.metadata.model for r in results]
        return cls(
            video_id=video_id,
            segments=segments,
            metadata=AnalysisMetadata(
                model=models[0] if len(set(models)) == 1 else "merged",
                processing_time_ms=sum(r.metadata.processing_time_ms for r in results),
                transcript_length=max(r.metadata.transcript_length for r in results),
                source_count=len(results),
                models=models,
            ),
        )
