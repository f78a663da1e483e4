"""Persisted skip statistics."""

import asyncio
import logging
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from smartskip.errors import StorageError
from smartskip.models.events import AnalysisCompleted, SegmentSkipped, SkipEvent
from smartskip.models.segment import format_timestamp
from smartskip.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

STATS_KEY = "user_stats"


class SkipStats(BaseModel):
    """Cumulative skip counters. Serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_skips: int = Field(default=0, ge=0)
    total_time_saved: float = Field(default=0.0, ge=0.0, description="Seconds skipped")
    videos_analyzed: int = Field(default=0, ge=0)
    categories: dict[str, int] = Field(default_factory=dict, description="Skips per category label")
    first_use: datetime | None = None
    last_updated: datetime | None = None

    def summary(self) -> dict[str, object]:
        return {
            "totalSkips": self.total_skips,
            "timeSaved": format_timestamp(self.total_time_saved),
            "videosAnalyzed": self.videos_analyzed,
            "topCategory": max(self.categories, key=self.categories.get) if self.categories else None,
        }


class SkipStatsRecorder:
    """Analytics collaborator that counts skips and analyses.

    Subscribe ``handle_event`` to an ``EventBus`` to feed it.
    """

    def __init__(self, store: KeyValueStore, key: str = STATS_KEY) -> None:
        self._store = store
        self._key = key
        self._lock = asyncio.Lock()

    async def get_stats(self) -> SkipStats:
        """Load the stored statistics, starting fresh if none or unreadable."""
        try:
            data = await self._store.get(self._key)
        except Exception as exc:
            raise StorageError(f"Failed to read stats: {exc}", operation="read", key=self._key) from exc

        raw = data.get(self._key)
        if raw is None:
            return SkipStats()
        try:
            return SkipStats.model_validate(raw)
        except PydanticValidationError:
            logger.warning("Stored stats are unreadable, starting fresh")
            return SkipStats()

    async def _save(self, stats: SkipStats) -> None:
        now = datetime.now(timezone.utc)
        stats.last_updated = now
        if stats.first_use is None:
            stats.first_use = now
        try:
            await self._store.set({self._key: stats.model_dump(mode="json", by_alias=True)})
        except Exception as exc:
            raise StorageError(f"Failed to write stats: {exc}", operation="write", key=self._key) from exc

    async def record_skip(self, category: str, duration: float) -> SkipStats:
        async with self._lock:
            stats = await self.get_stats()
            stats.total_skips += 1
            stats.total_time_saved += max(duration, 0.0)
            stats.categories[category] = stats.categories.get(category, 0) + 1
            await self._save(stats)
        logger.debug("Recorded skip: %s (%.1fs)", category, duration)
        return stats

    async def record_analysis(self) -> SkipStats:
        async with self._lock:
            stats = await self.get_stats()
            stats.videos_analyzed += 1
            await self._save(stats)
        return stats

    async def summary(self) -> dict[str, object]:
        return (await self.get_stats()).summary()

    async def reset(self) -> None:
        async with self._lock:
            try:
                await self._store.remove(self._key)
            except Exception as exc:
                raise StorageError(f"Failed to reset stats: {exc}", operation="delete", key=self._key) from exc

    async def handle_event(self, event: SkipEvent) -> None:
        """Event bus listener."""
        if isinstance(event, SegmentSkipped):
            await self.record_skip(event.category, event.duration)
        elif isinstance(event, AnalysisCompleted) and not event.from_cache:
            await self.record_analysis()
