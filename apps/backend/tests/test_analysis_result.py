"""Tests for analysis results and transcripts."""

from datetime import datetime, timedelta, timezone

import pytest

from smartskip.errors import ValidationError
from smartskip.models.analysis import AnalysisMetadata, AnalysisResult
from smartskip.models.preferences import SkipPreferences
from smartskip.models.segment import Segment
from smartskip.models.transcript import Transcript


def _result(video_id: str = "abc", analyzed_at: datetime | None = None, model: str = "claude-3-5-haiku") -> AnalysisResult:
    return AnalysisResult(
        video_id=video_id,
        segments=[
            Segment(start=0, end=30, category="Sponsor", confidence=0.9, description="VPN read"),
            Segment(start=25, end=40, category="Sponsor", confidence=0.7),
            Segment(start=100, end=110, category="Intro", confidence=0.99),
        ],
        metadata=AnalysisMetadata(
            analyzed_at=analyzed_at or datetime(2024, 5, 1, tzinfo=timezone.utc),
            model=model,
            processing_time_ms=1234.5,
            transcript_length=5000,
        ),
    )


class TestAnalysisResult:
    def test_properties(self) -> None:
        result = _result()
        assert result.segment_count == 3
        assert result.total_skip_duration == 55
        assert result.category_counts == {"Sponsor": 2, "Intro": 1}
        assert not result.is_empty

    def test_filter_by_confidence_returns_new_result(self) -> None:
        result = _result()
        filtered = result.filter_by_confidence(0.85)
        assert filtered.segment_count == 2
        assert result.segment_count == 3
        assert filtered.metadata == result.metadata

    def test_filter_by_enabled_categories(self) -> None:
        filtered = _result().filter_by_enabled_categories(SkipPreferences(skip_sponsors=False).should_skip)
        assert [s.category for s in filtered.segments] == ["Intro"]

    def test_merge_overlapping(self) -> None:
        merged = _result().merge_overlapping()
        assert [(s.start, s.end) for s in merged.segments] == [(0, 40), (100, 110)]
        assert merged.segments[0].confidence == 0.7

    def test_staleness(self) -> None:
        now = datetime(2024, 6, 15, tzinfo=timezone.utc)
        result = _result(analyzed_at=datetime(2024, 5, 1, tzinfo=timezone.utc))
        assert result.is_stale(timedelta(days=30), now=now)
        assert not result.is_stale(timedelta(days=60), now=now)

    def test_naive_timestamp_treated_as_utc(self) -> None:
        metadata = AnalysisMetadata(analyzed_at=datetime(2024, 5, 1))
        assert metadata.analyzed_at.tzinfo is timezone.utc

    def test_wire_format_uses_camel_case(self) -> None:
        data = _result().to_dict()
        assert data["videoId"] == "abc"
        assert data["metadata"]["processingTimeMs"] == 1234.5
        assert data["metadata"]["transcriptLength"] == 5000
        assert "analyzedAt" in data["metadata"]
        assert data["segments"][0]["duration"] == 30

    def test_round_trip(self) -> None:
        result = _result()
        restored = AnalysisResult.from_dict(result.to_dict())
        assert restored.to_dict() == result.to_dict()
        assert restored.metadata.analyzed_at == result.metadata.analyzed_at

    def test_from_dict_rejects_bad_segment(self) -> None:
        data = _result().to_dict()
        data["segments"][0]["end"] = -5
        with pytest.raises(ValidationError):
            AnalysisResult.from_dict(data)

    def test_from_dict_rejects_missing_video_id(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult.from_dict({"segments": [], "metadata": {}})

    def test_summary(self) -> None:
        summary = _result().summary()
        assert summary["segmentCount"] == 3
        assert summary["formattedDuration"] == "0:55"

    def test_create_empty(self) -> None:
        empty = AnalysisResult.create_empty("xyz", model="m")
        assert empty.is_empty
        assert empty.metadata.model == "m"

    def test_merge_results(self) -> None:
        merged = AnalysisResult.merge([_result(model="a"), _result(model="b")])
        assert merged.metadata.model == "merged"
        assert merged.metadata.source_count == 2
        assert merged.metadata.models == ["a", "b"]
        assert [(s.start, s.end) for s in merged.segments] == [(0, 40), (100, 110)]

    def test_merge_rejects_mixed_videos(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult.merge([_result("a"), _result("b")])

    def test_merge_rejects_empty(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult.merge([])


class TestTranscript:
    def test_format_for_prompt(self) -> None:
        transcript = Transcript.from_lines("v", [{"time": 0.4, "text": " hello "}, {"time": 12.9, "text": "world"}])
        assert transcript.format_for_prompt() == "[0s] hello\n[12s] world"
        assert transcript.word_count == 2

    def test_blank_lines_are_empty(self) -> None:
        transcript = Transcript.from_lines("v", [{"time": 0, "text": "   "}])
        assert transcript.is_empty

    def test_sufficient_content(self) -> None:
        transcript = Transcript.from_lines("v", [{"time": 0, "text": "word " * 60}])
        assert transcript.has_sufficient_content()
        assert not transcript.has_sufficient_content(min_words=100)

    def test_negative_time_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Transcript.from_lines("v", [{"time": -1, "text": "x"}])
