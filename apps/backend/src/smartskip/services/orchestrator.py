"""Per-video analysis orchestration: cache check, classification, caching."""

import logging
import time

from smartskip.errors import (
    AnalysisError,
    AnalysisInProgressError,
    StorageError,
    TranscriptUnavailableError,
)
from smartskip.models.analysis import AnalysisMetadata, AnalysisResult, AnalysisStage
from smartskip.models.events import AnalysisCompleted, AnalysisFailed, AnalysisStarted, SkipEvent
from smartskip.models.preferences import SkipPreferences
from smartskip.models.segment import merge_overlapping
from smartskip.models.transcript import Transcript
from smartskip.services.cache import CacheStore
from smartskip.services.classifier.client import ClassifierClient
from smartskip.services.events import EventBus

logger = logging.getLogger(__name__)


class AnalysisOrchestrator:
    """Runs the analysis state machine for each video.

    Stages always run in the order cache check, classifying, parsing,
    filtering, merging, caching. At most one run per video id may be in
    flight; a concurrent second run is rejected before it reaches the
    classifier.
    """

    #: Finished videos whose last stage stays queryable.
    max_tracked_stages = 256

    def __init__(
        self,
        cache: CacheStore,
        client: ClassifierClient,
        events: EventBus | None = None,
        refilter_cached_confidence: bool = False,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            cache: Two-tier result cache.
            client: Classifier client used on cache misses.
            events: Optional bus for lifecycle events.
            refilter_cached_confidence: Re-apply the confidence threshold
                to cached results as well as the category toggles.
        """
        self.cache = cache
        self.client = client
        self.events = events
        self.refilter_cached_confidence = refilter_cached_confidence
        self._in_flight: set[str] = set()
        self._stages: dict[str, AnalysisStage] = {}

    def stage(self, video_id: str) -> AnalysisStage:
        """Return the current (or last) stage for a video."""
        return self._stages.get(video_id, AnalysisStage.IDLE)

    def is_in_flight(self, video_id: str) -> bool:
        return video_id in self._in_flight

    async def analyze(self, transcript: Transcript, preferences: SkipPreferences) -> AnalysisResult:
        """Return skip segments for a video, classifying on cache miss.

        Args:
            transcript: Timestamped transcript of the video.
            preferences: Current user toggles and threshold.

        Returns:
            Result filtered by the current preferences.

        Raises:
            AnalysisInProgressError: If a run for this video is already active.
            AnalysisError: If any stage fails. ``cause`` holds the original error.
        """
        video_id = transcript.video_id
        # Claimed before the first await so a concurrent caller sees it.
        if video_id in self._in_flight:
            logger.info("Analysis already in flight for %s, rejecting duplicate", video_id)
            raise AnalysisInProgressError(video_id)
        self._in_flight.add(video_id)
        try:
            return await self._run(transcript, preferences)
        finally:
            self._in_flight.discard(video_id)
            self._prune_stages()

    async def _run(self, transcript: Transcript, preferences: SkipPreferences) -> AnalysisResult:
        video_id = transcript.video_id
        await self._emit(AnalysisStarted(video_id=video_id))
        logger.info("Analysis started: %s", video_id)

        self._set_stage(video_id, AnalysisStage.CACHE_CHECK)
        cached = await self._read_cache(video_id)
        if cached is not None:
            result = self.apply_preferences(cached, preferences)
            self._set_stage(video_id, AnalysisStage.DONE)
            logger.info("Cache hit for %s: %d of %d segments apply", video_id, result.segment_count, cached.segment_count)
            await self._emit(AnalysisCompleted(video_id=video_id, result=result, from_cache=True))
            return result

        try:
            result = await self._classify(transcript, preferences)
        except Exception as exc:
            stage = self.stage(video_id)
            self._set_stage(video_id, AnalysisStage.FAILED)
            error = AnalysisError(video_id, stage, exc)
            logger.error("Analysis failed for %s during %s: %s", video_id, stage.value, exc)
            await self._emit(
                AnalysisFailed(
                    video_id=video_id,
                    stage=stage,
                    message=error.user_message,
                    error_type=type(exc).__name__,
                )
            )
            raise error from exc

        # An empty run with every category off says nothing about the video.
        if preferences.enabled_categories():
            self._set_stage(video_id, AnalysisStage.CACHING)
            try:
                await self.cache.set(video_id, result)
            except StorageError as exc:
                logger.warning("Cache write failed for %s, result kept for this session: %s", video_id, exc)

        self._set_stage(video_id, AnalysisStage.DONE)
        logger.info(
            "Analysis complete: %s, %d segments in %.0fms",
            video_id,
            result.segment_count,
            result.metadata.processing_time_ms,
        )
        await self._emit(AnalysisCompleted(video_id=video_id, result=result, from_cache=False))
        return result

    async def _classify(self, transcript: Transcript, preferences: SkipPreferences) -> AnalysisResult:
        video_id = transcript.video_id
        if transcript.is_empty:
            raise TranscriptUnavailableError(f"No transcript for video {video_id}", field="lines")

        started = time.perf_counter()
        enabled = preferences.enabled_categories()
        if not enabled:
            logger.info("No categories enabled for %s, skipping classification", video_id)
            return AnalysisResult.create_empty(
                video_id,
                model=self.client.model_id,
                provider=self.client.provider_name,
                transcript_length=transcript.char_count,
            )

        self._set_stage(video_id, AnalysisStage.CLASSIFYING)
        prompt = self.client.build_prompt(transcript.format_for_prompt(), enabled)
        raw = await self.client.send(prompt)

        self._set_stage(video_id, AnalysisStage.PARSING)
        candidates = self.client.parse_response(raw)

        self._set_stage(video_id, AnalysisStage.FILTERING)
        candidates = self.client.filter_by_confidence(candidates, preferences.confidence_threshold)
        candidates = [c for c in candidates if preferences.is_enabled(c.category)]

        self._set_stage(video_id, AnalysisStage.MERGING)
        segments = merge_overlapping(c.to_segment() for c in candidates)

        return AnalysisResult(
            video_id=video_id,
            segments=segments,
            metadata=AnalysisMetadata(
                model=self.client.model_id,
                provider=self.client.provider_name,
                processing_time_ms=(time.perf_counter() - started) * 1000,
                transcript_length=transcript.char_count,
            ),
        )

    def apply_preferences(self, result: AnalysisResult, preferences: SkipPreferences) -> AnalysisResult:
        """Filter a cached result by the current user settings."""
        filtered = result.filter_by_enabled_categories(preferences.should_skip)
        if self.refilter_cached_confidence:
            filtered = filtered.filter_by_confidence(preferences.confidence_threshold)
        return filtered

    async def _read_cache(self, video_id: str) -> AnalysisResult | None:
        try:
            return await self.cache.get(video_id)
        except StorageError as exc:
            logger.warning("Cache read failed for %s, treating as miss: %s", video_id, exc)
            return None

    def _set_stage(self, video_id: str, stage: AnalysisStage) -> None:
        # Re-insert so dict order tracks recency.
        self._stages.pop(video_id, None)
        self._stages[video_id] = stage
        logger.debug("%s -> %s", video_id, stage.value)

    def _prune_stages(self) -> None:
        excess = len(self._stages) - self.max_tracked_stages
        if excess <= 0:
            return
        stale = [v for v in self._stages if v not in self._in_flight][:excess]
        for video_id in stale:
            del self._stages[video_id]

    async def _emit(self, event: SkipEvent) -> None:
        if self.events is not None:
            await self.events.emit(event)
