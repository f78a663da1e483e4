"""Working set of segments still pending for one video."""

from dataclasses import dataclass, field

from smartskip.models.segment import Segment, merge_overlapping


@dataclass
class SkipSession:
    """Pending segments for the video currently attached to a monitor."""

    video_id: str
    pending: list[Segment] = field(default_factory=list)
    skipped: int = 0

    @classmethod
    def from_segments(cls, video_id: str, segments: list[Segment]) -> "SkipSession":
        """Build a session, merging segments that may not be pre-merged."""
        return cls(video_id=video_id, pending=merge_overlapping(segments))

    def find_active(self, time: float, buffer: float = 0.0) -> Segment | None:
        """First pending segment with ``start - buffer <= time < end``."""
        for segment in self.pending:
            if segment.contains(time, buffer):
                return segment
        return None

    def evict_passed(self, time: float) -> list[Segment]:
        """Remove every pending segment that ends at or before ``time``."""
        passed = [s for s in self.pending if s.end <= time]
        if passed:
            self.pending = [s for s in self.pending if s.end > time]
        return passed

    def drop(self, segment: Segment) -> bool:
        """Remove one segment for the rest of the session."""
        for index, candidate in enumerate(self.pending):
            if candidate is segment or candidate == segment:
                del self.pending[index]
                return True
        return False
