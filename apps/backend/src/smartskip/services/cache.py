"""Two-tier cache of analysis results keyed by video id."""

import logging
from datetime import datetime, timedelta

from pydantic import BaseModel, Field

from smartskip.errors import StorageError, ValidationError
from smartskip.models.analysis import DEFAULT_MAX_AGE, AnalysisResult
from smartskip.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "analysis_"


class CacheStats(BaseModel):
    """Aggregate view over persisted cache entries."""

    total_entries: int = 0
    memory_entries: int = 0
    total_segments: int = 0
    average_segments: float = 0.0
    oldest_entry: datetime | None = None
    newest_entry: datetime | None = None
    stale_entries: int = 0
    corrupt_entries: int = Field(default=0, description="Entries that failed to deserialize")


class CacheStore:
    """Memory tier in front of a persistent key-value store.

    The memory tier is filled on first read from the persistent tier and
    is authoritative afterwards. Writes update memory synchronously and
    the persistent tier asynchronously; a failed persistent write leaves
    the memory tier holding the new value and raises ``StorageError``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        max_age: timedelta = DEFAULT_MAX_AGE,
    ) -> None:
        self._store = store
        self._prefix = key_prefix
        self._max_age = max_age
        self._memory: dict[str, AnalysisResult] = {}

    @property
    def memory_size(self) -> int:
        return len(self._memory)

    def cache_key(self, video_id: str) -> str:
        return f"{self._prefix}{video_id}"

    def _video_id_from_key(self, key: str) -> str:
        return key[len(self._prefix):]

    async def get(self, video_id: str) -> AnalysisResult | None:
        """Return the cached result, reading through to the persistent tier.

        Raises:
            StorageError: If the persistent read fails or the entry is corrupt.
        """
        cached = self._memory.get(video_id)
        if cached is not None:
            logger.debug("Memory cache hit: %s", video_id)
            return cached

        key = self.cache_key(video_id)
        try:
            data = await self._store.get(key)
        except Exception as exc:
            raise StorageError(f"Failed to read cache entry: {exc}", operation="read", key=key) from exc

        raw = data.get(key)
        if raw is None:
            logger.debug("Cache miss: %s", video_id)
            return None

        try:
            result = AnalysisResult.from_dict(raw)
        except ValidationError as exc:
            raise StorageError(f"Corrupt cache entry: {exc}", operation="read", key=key) from exc

        self._memory[video_id] = result
        logger.debug("Persistent cache hit: %s", video_id)
        return result

    async def set(self, video_id: str, result: AnalysisResult) -> None:
        """Store a result in both tiers.

        Raises:
            StorageError: If the persistent write fails. The memory tier
                still holds ``result``.
        """
        self._memory[video_id] = result
        key = self.cache_key(video_id)
        try:
            await self._store.set({key: result.to_dict()})
        except Exception as exc:
            raise StorageError(f"Failed to write cache entry: {exc}", operation="write", key=key) from exc
        logger.info("Cached analysis for %s (%d segments)", video_id, result.segment_count)

    async def invalidate(self, video_id: str) -> None:
        """Remove a video from both tiers."""
        self._memory.pop(video_id, None)
        key = self.cache_key(video_id)
        try:
            await self._store.remove(key)
        except Exception as exc:
            raise StorageError(f"Failed to delete cache entry: {exc}", operation="delete", key=key) from exc
        logger.info("Invalidated cache for %s", video_id)

    async def has(self, video_id: str) -> bool:
        return await self.get(video_id) is not None

    async def _read_all(self) -> dict[str, object]:
        try:
            data = await self._store.get(None)
        except Exception as exc:
            raise StorageError(f"Failed to enumerate cache: {exc}", operation="enumerate") from exc
        return {k: v for k, v in data.items() if k.startswith(self._prefix)}

    async def _load_all(self) -> tuple[dict[str, AnalysisResult], list[str]]:
        """Deserialize every persisted entry, separating out corrupt keys."""
        results: dict[str, AnalysisResult] = {}
        corrupt: list[str] = []
        for key, raw in (await self._read_all()).items():
            try:
                results[key] = AnalysisResult.from_dict(raw)
            except ValidationError:
                logger.warning("Skipping corrupt cache entry %s", key)
                corrupt.append(key)
        return results, corrupt

    async def video_ids(self) -> list[str]:
        return [self._video_id_from_key(k) for k in await self._read_all()]

    async def sweep_stale(self, max_age: timedelta | None = None) -> int:
        """Delete persisted entries older than ``max_age``.

        Corrupt entries are removed as well. Deletion is by exact key, so
        concurrent reads and writes of other videos are unaffected.

        Returns:
            Number of entries deleted.
        """
        limit = max_age if max_age is not None else self._max_age
        results, corrupt = await self._load_all()
        doomed = [key for key, result in results.items() if result.is_stale(limit)] + corrupt
        if not doomed:
            logger.info("Cache sweep: nothing to delete (%d entries)", len(results))
            return 0

        try:
            await self._store.remove(doomed)
        except Exception as exc:
            raise StorageError(f"Failed to sweep cache: {exc}", operation="sweep") from exc
        for key in doomed:
            self._memory.pop(self._video_id_from_key(key), None)

        logger.info("Cache sweep deleted %d of %d entries", len(doomed), len(results) + len(corrupt))
        return len(doomed)

    async def stats(self, max_age: timedelta | None = None) -> CacheStats:
        """Summarize the persisted cache."""
        limit = max_age if max_age is not None else self._max_age
        results, corrupt = await self._load_all()
        entries = list(results.values())
        if not entries:
            return CacheStats(memory_entries=self.memory_size, corrupt_entries=len(corrupt))

        total_segments = sum(r.segment_count for r in entries)
        timestamps = sorted(r.metadata.analyzed_at for r in entries)
        return CacheStats(
            total_entries=len(entries),
            memory_entries=self.memory_size,
            total_segments=total_segments,
            average_segments=total_segments / len(entries),
            oldest_entry=timestamps[0],
            newest_entry=timestamps[-1],
            stale_entries=sum(1 for r in entries if r.is_stale(limit)),
            corrupt_entries=len(corrupt),
        )

    async def clear(self) -> int:
        """Delete every cache entry from both tiers."""
        keys = list(await self._read_all())
        self._memory.clear()
        if keys:
            try:
                await self._store.remove(keys)
            except Exception as exc:
                raise StorageError(f"Failed to clear cache: {exc}", operation="clear") from exc
        logger.warning("Cleared %d cache entries", len(keys))
        return len(keys)
