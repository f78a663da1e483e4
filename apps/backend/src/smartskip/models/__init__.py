"""Data models for SmartSkip."""

from smartskip.models.analysis import AnalysisMetadata, AnalysisResult, AnalysisStage
from smartskip.models.category import Category
from smartskip.models.events import (
    AnalysisCompleted,
    AnalysisFailed,
    AnalysisStarted,
    PreviewCancelled,
    PreviewStarted,
    SegmentSkipped,
    SkipEvent,
)
from smartskip.models.preferences import SkipPreferences
from smartskip.models.segment import Segment, merge_overlapping
from smartskip.models.transcript import Transcript, TranscriptLine

__all__ = [
    # Segments
    "Category",
    "Segment",
    "merge_overlapping",
    # Analysis
    "AnalysisMetadata",
    "AnalysisResult",
    "AnalysisStage",
    # Transcript
    "Transcript",
    "TranscriptLine",
    # Preferences
    "SkipPreferences",
    # Events
    "SkipEvent",
    "AnalysisStarted",
    "AnalysisCompleted",
    "AnalysisFailed",
    "PreviewStarted",
    "PreviewCancelled",
    "SegmentSkipped",
]
