"""Custom exceptions for SmartSkip."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from smartskip.models.analysis import AnalysisStage


class SmartSkipError(Exception):
    """Base exception for SmartSkip."""

    @property
    def user_message(self) -> str:
        """Short, actionable text suitable for a notification."""
        return str(self)


class ValidationError(SmartSkipError, ValueError):
    """Segment, settings or transcript data is malformed."""

    def __init__(self, message: str, field: str | None = None, value: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class TranscriptUnavailableError(ValidationError):
    """The video has no usable transcript."""

    @property
    def user_message(self) -> str:
        return "No transcript available for this video."


class StorageError(SmartSkipError):
    """Persistent store operation failed."""

    def __init__(self, message: str, operation: str, key: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.key = key

    @property
    def user_message(self) -> str:
        return f"Storage operation failed: {self.operation}"


class ClassifierError(SmartSkipError):
    """Classifier call failed."""

    @property
    def user_message(self) -> str:
        return "Classifier unavailable. Try again later."


class ClassifierTimeoutError(ClassifierError):
    """Classifier request exceeded its time budget."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(f"Classifier request timed out after {timeout_seconds:g}s")
        self.timeout_seconds = timeout_seconds

    @property
    def user_message(self) -> str:
        return "The classifier took too long to respond."


class ClassifierTransportError(ClassifierError):
    """Network or provider API error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def user_message(self) -> str:
        if self.status_code == 401:
            return "API key invalid or expired. Check your configuration."
        if self.status_code == 429:
            return "Rate limit exceeded. Try again later."
        if self.status_code is not None and self.status_code >= 500:
            return "Classifier unavailable. The provider reported a server error."
        return f"Classifier error: {self}"


class ClassifierParseError(ClassifierError):
    """Classifier response did not match the required shape."""

    def __init__(self, message: str, raw: str | None = None) -> None:
        super().__init__(message)
        self.raw = raw[:500] if raw else raw

    @property
    def user_message(self) -> str:
        return "The classifier returned an unreadable answer."


class AnalysisInProgressError(SmartSkipError):
    """A classification for this video is already running."""

    def __init__(self, video_id: str) -> None:
        super().__init__(f"Analysis already in progress for video {video_id}")
        self.video_id = video_id

    @property
    def user_message(self) -> str:
        return "Analysis already in progress for this video."


class AnalysisError(SmartSkipError):
    """Analysis run failed at a given stage."""

    def __init__(self, video_id: str, stage: AnalysisStage, cause: Exception) -> None:
        super().__init__(f"Analysis of {video_id} failed during {stage.value}: {cause}")
        self.video_id = video_id
        self.stage = stage
        self.cause = cause

    @property
    def user_message(self) -> str:
        if isinstance(self.cause, SmartSkipError):
            return self.cause.user_message
        return "Analysis failed."
