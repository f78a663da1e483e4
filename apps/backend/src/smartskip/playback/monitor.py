"""Playback monitor: previews and performs skips as the clock advances."""

import asyncio
import logging
from enum import Enum

from smartskip.models.analysis import AnalysisResult
from smartskip.models.events import PreviewCancelled, PreviewStarted, SegmentSkipped, SkipEvent
from smartskip.models.preferences import SkipPreferences
from smartskip.models.segment import Segment
from smartskip.playback.base import IPlayer
from smartskip.playback.session import SkipSession
from smartskip.services.events import EventBus

logger = logging.getLogger(__name__)


class MonitorState(str, Enum):
    DETACHED = "detached"
    ATTACHED = "attached"
    WATCHING = "watching"
    PREVIEWING = "previewing"


class PlaybackMonitor:
    """Watches one player and skips pending segments.

    Feed clock samples to ``on_time_update`` at whatever rate the player
    reports them. When preview is enabled, a skip is announced with a
    cancellable countdown of ``skip_buffer`` seconds first.
    """

    def __init__(
        self,
        player: IPlayer,
        preferences: SkipPreferences,
        events: EventBus | None = None,
    ) -> None:
        self.player = player
        self.preferences = preferences
        self.events = events
        self.state = MonitorState.DETACHED
        self._session: SkipSession | None = None
        self._preview_segment: Segment | None = None
        self._preview_task: asyncio.Task | None = None

    @property
    def video_id(self) -> str | None:
        return self._session.video_id if self._session else None

    @property
    def pending_segments(self) -> list[Segment]:
        return list(self._session.pending) if self._session else []

    @property
    def preview_segment(self) -> Segment | None:
        return self._preview_segment

    def attach(self, result: AnalysisResult) -> None:
        """Start a fresh session for a video, discarding any previous one."""
        if self._session is not None:
            self.detach()
        self._session = SkipSession.from_segments(result.video_id, result.segments)
        self.state = MonitorState.ATTACHED
        logger.info("Attached to %s with %d pending segments", result.video_id, len(self._session.pending))

    def detach(self) -> None:
        """Drop the current session, e.g. when the page switches video."""
        self._cancel_countdown()
        if self._session is not None:
            logger.info("Detached from %s", self._session.video_id)
        self._session = None
        self._preview_segment = None
        self.state = MonitorState.DETACHED

    async def on_time_update(self, current_time: float) -> None:
        """Handle a playback clock sample."""
        if self._session is None or self.state == MonitorState.PREVIEWING:
            return
        self.state = MonitorState.WATCHING
        # Passed segments stay gone even if playback seeks back into them.
        passed = self._session.evict_passed(current_time)
        if passed:
            logger.debug("%d segments passed at %.1fs", len(passed), current_time)
        if not self.preferences.auto_skip:
            return

        segment = self._session.find_active(current_time, self.preferences.skip_buffer)
        if segment is None:
            return

        if self.preferences.enable_preview and self.preferences.skip_buffer > 0:
            await self._start_preview(segment)
        else:
            await self._skip(segment, manual=False)

    async def _start_preview(self, segment: Segment) -> None:
        self.state = MonitorState.PREVIEWING
        self._preview_segment = segment
        buffer = self.preferences.skip_buffer
        logger.debug("Previewing skip of %s (%s) for %.1fs", segment.category, segment.time_range, buffer)
        await self._emit(PreviewStarted(video_id=self.video_id, segment=segment, buffer_seconds=buffer))
        self._preview_task = asyncio.create_task(self._countdown(segment, buffer))
        self._preview_task.add_done_callback(self._on_countdown_done)

    async def _countdown(self, segment: Segment, buffer: float) -> None:
        await asyncio.sleep(buffer)
        self._preview_task = None
        self._preview_segment = None
        self.state = MonitorState.WATCHING
        await self._skip(segment, manual=False)

    def _on_countdown_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Preview skip failed for %s: %s", self.video_id, exc, exc_info=exc)

    async def wait_for_preview(self) -> None:
        """Wait until a running preview countdown has finished."""
        task = self._preview_task
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def cancel_preview(self) -> bool:
        """Cancel the running preview.

        The previewed segment will not trigger again for this session.

        Returns:
            True if a preview was cancelled.
        """
        if self.state != MonitorState.PREVIEWING or self._preview_segment is None:
            return False
        segment = self._preview_segment
        self._cancel_countdown()
        if self._session is not None:
            self._session.drop(segment)
        self._preview_segment = None
        self.state = MonitorState.WATCHING
        logger.info("Preview cancelled: %s %s", segment.category, segment.time_range)
        await self._emit(PreviewCancelled(video_id=self.video_id, segment=segment))
        return True

    async def skip_segment(self, segment: Segment) -> None:
        """Skip a segment right away, as when the user clicks its marker."""
        if self._session is None:
            return
        if self._preview_segment is not None:
            self._cancel_countdown()
            self._preview_segment = None
            self.state = MonitorState.WATCHING
        await self._skip(segment, manual=True)

    async def _skip(self, segment: Segment, manual: bool) -> None:
        if self._session is None:
            return
        current = self.player.current_time
        if current < segment.end:
            self.player.seek(segment.end)
        new_time = max(current, segment.end)

        passed = self._session.evict_passed(new_time)
        self._session.skipped += 1
        logger.info(
            "Skipped %s %s%s (%d segments passed)",
            segment.category,
            segment.time_range,
            " manually" if manual else "",
            len(passed),
        )
        await self._emit(SegmentSkipped(video_id=self.video_id, segment=segment, manual=manual))

    def _cancel_countdown(self) -> None:
        if self._preview_task is not None and not self._preview_task.done():
            self._preview_task.cancel()
        self._preview_task = None

    async def _emit(self, event: SkipEvent) -> None:
        if self.events is not None:
            await self.events.emit(event)
