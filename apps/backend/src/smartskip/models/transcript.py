"""Transcript models consumed by the classifier."""

from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from smartskip.errors import ValidationError


class TranscriptLine(BaseModel):
    """A single caption line with its start time."""

    time: float = Field(..., ge=0.0, description="Start time in seconds")
    text: str = Field(..., description="Caption text")


class Transcript(BaseModel):
    """Timed transcript of one video."""

    video_id: str = Field(..., min_length=1, description="Video identifier")
    lines: list[TranscriptLine] = Field(default_factory=list, description="Caption lines in order")

    @property
    def text(self) -> str:
        """Return the whole transcript as a single string."""
        return " ".join(line.text.strip() for line in self.lines if line.text.strip())

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    @property
    def char_count(self) -> int:
        return len(self.text)

    @property
    def is_empty(self) -> bool:
        return not self.text

    def has_sufficient_content(self, min_words: int = 50) -> bool:
        return self.word_count >= min_words

    def format_for_prompt(self) -> str:
        """Render one ``[Ns] text`` line per caption for the classifier."""
        return "\n".join(
            f"[{int(line.time)}s] {line.text.strip()}"
            for line in self.lines
            if line.text.strip()
        )

    @classmethod
    def from_lines(cls, video_id: str, lines: list[dict[str, Any]]) -> "Transcript":
        """Build a transcript from ``{time, text}`` mappings.

        Raises:
            ValidationError: If any line is malformed.
        """
        try:
            return cls(video_id=video_id, lines=lines)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid transcript: {exc}", field="lines") from exc
