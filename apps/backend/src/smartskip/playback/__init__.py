"""Playback-time skipping."""

from smartskip.playback.base import IPlayer
from smartskip.playback.monitor import MonitorState, PlaybackMonitor
from smartskip.playback.session import SkipSession

__all__ = ["IPlayer", "MonitorState", "PlaybackMonitor", "SkipSession"]
