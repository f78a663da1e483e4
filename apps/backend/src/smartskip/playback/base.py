"""Player interface driven by the playback monitor."""

from typing import Protocol


class IPlayer(Protocol):
    """Anything with a playback clock that can be moved."""

    @property
    def current_time(self) -> float:
        """Current playback position in seconds."""
        ...

    def seek(self, seconds: float) -> None:
        """Move the playback position."""
        ...
