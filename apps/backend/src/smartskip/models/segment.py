"""Skippable segment model and the merge algorithm."""

from collections import defaultdict
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from smartskip.errors import ValidationError
from smartskip.models.category import MERGED_CATEGORY_SEPARATOR

DESCRIPTION_SEPARATOR = " | "


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``M:SS``."""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


class Segment(BaseModel):
    """A time range to skip, in seconds.

    Segments are immutable: merging and cloning return new instances.
    """

    model_config = ConfigDict(frozen=True)

    start: float = Field(..., ge=0.0, description="Start time in seconds")
    end: float = Field(..., description="End time in seconds")
    category: str = Field(..., min_length=1, description="Category label")
    description: str = Field(default="", description="Short description of the segment")
    confidence: float = Field(
        default=1.0, ge=0.0, le=1.0, description="Classifier confidence"
    )

    @model_validator(mode="after")
    def validate_range(self) -> "Segment":
        """Ensure end is after start."""
        if self.end <= self.start:
            raise ValueError("end must be greater than start")
        return self

    @property
    def duration(self) -> float:
        """Return duration in seconds."""
        return self.end - self.start

    @property
    def time_range(self) -> str:
        return f"{format_timestamp(self.start)} - {format_timestamp(self.end)}"

    def contains(self, time: float, buffer: float = 0.0) -> bool:
        """Check if a playback time falls within this segment (or its lead-in buffer)."""
        return self.start - buffer <= time < self.end

    def overlaps(self, other: "Segment") -> bool:
        """Check if this segment overlaps or touches another."""
        return self.start <= other.end and other.start <= self.end

    def meets_confidence_threshold(self, threshold: float) -> bool:
        return self.confidence >= threshold

    def merge(self, other: "Segment") -> "Segment":
        """Combine two segments into one covering both ranges.

        The merged confidence is the minimum of the two inputs.
        """
        if self.category == other.category:
            category = self.category
        else:
            category = f"{self.category}{MERGED_CATEGORY_SEPARATOR}{other.category}"
        description = DESCRIPTION_SEPARATOR.join(
            d for d in (self.description, other.description) if d
        )
        return Segment(
            start=min(self.start, other.start),
            end=max(self.end, other.end),
            category=category,
            description=description,
            confidence=min(self.confidence, other.confidence),
        )

    def clone(self) -> "Segment":
        return self.model_copy()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the cache wire format."""
        data = self.model_dump()
        data["duration"] = self.duration
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Segment":
        """Deserialize from the cache wire format.

        Raises:
            ValidationError: If the data violates segment invariants.
        """
        if not isinstance(data, dict):
            raise ValidationError("Segment must be an object", value=data)
        try:
            return cls(
                start=data.get("start"),
                end=data.get("end"),
                category=data.get("category"),
                description=data.get("description") or "",
                confidence=data.get("confidence", 1.0),
            )
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid segment data: {exc}", value=data) from exc


def sort_segments(segments: Iterable[Segment]) -> list[Segment]:
    """Sort by start, ties broken by end."""
    return sorted(segments, key=lambda s: (s.start, s.end))


def merge_overlapping(segments: Iterable[Segment]) -> list[Segment]:
    """Collapse segments into a sorted, non-overlapping list.

    Touching segments (``start == previous.end``) are merged as well.
    """
    ordered = sort_segments(segments)
    if not ordered:
        return []

    merged: list[Segment] = [ordered[0].clone()]
    for current in ordered[1:]:
        last = merged[-1]
        if current.start <= last.end:
            merged[-1] = last.merge(current)
        else:
            merged.append(current.clone())
    return merged


def filter_by_confidence(segments: Iterable[Segment], threshold: float) -> list[Segment]:
    return [s for s in segments if s.meets_confidence_threshold(threshold)]


def total_duration(segments: Iterable[Segment]) -> float:
    """Sum of segment durations in seconds."""
    return sum(s.duration for s in segments)


def group_by_category(segments: Iterable[Segment]) -> dict[str, list[Segment]]:
    groups: dict[str, list[Segment]] = defaultdict(list)
    for segment in segments:
        groups[segment.category].append(segment)
    return dict(groups)
