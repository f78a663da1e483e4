"""Strict parsing of classifier completions into segment candidates.

Parsing is fail-closed: one invalid candidate anywhere in the response
rejects the whole response.
"""

import json
import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict

from smartskip.errors import ClassifierParseError
from smartskip.models.category import Category
from smartskip.models.segment import Segment

_CODE_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)
_REQUIRED_FIELDS = ("start", "end", "category")


class SegmentCandidate(BaseModel):
    """A structurally valid segment proposed by the classifier."""

    model_config = ConfigDict(frozen=True)

    start: float
    end: float
    category: Category
    raw_category: str
    confidence: float | None = None
    description: str = ""

    def meets_threshold(self, threshold: float) -> bool:
        """Candidates without a confidence never meet a threshold."""
        return self.confidence is not None and self.confidence >= threshold

    def to_segment(self) -> Segment:
        return Segment(
            start=self.start,
            end=self.end,
            category=self.category.value,
            description=self.description,
            confidence=self.confidence if self.confidence is not None else 1.0,
        )


def extract_json_text(raw_text: str) -> str:
    """Pull the JSON object out of free-form model output.

    Code fences are stripped when present; otherwise the text from the
    first ``{`` to the last ``}`` is used.
    """
    text = raw_text.strip()
    fenced = _CODE_FENCE_RE.search(text)
    if fenced:
        text = fenced.group(1).strip()

    json_start = text.find("{")
    json_end = text.rfind("}")
    if json_start == -1 or json_end == -1 or json_end <= json_start:
        raise ClassifierParseError("Classifier output contains no JSON object", raw=raw_text)
    return text[json_start : json_end + 1]


def parse_candidates(raw_text: str) -> list[SegmentCandidate]:
    """Parse and validate a completion.

    Raises:
        ClassifierParseError: If the JSON is missing or malformed, or if
            any candidate fails validation.
    """
    json_text = extract_json_text(raw_text)
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise ClassifierParseError(f"Classifier returned invalid JSON: {exc}", raw=raw_text) from exc

    if not isinstance(data, dict):
        raise ClassifierParseError("Classifier response must be a JSON object", raw=raw_text)
    items = data.get("segments")
    if not isinstance(items, list):
        raise ClassifierParseError("Classifier response must contain a 'segments' array", raw=raw_text)

    return [_validate_candidate(item, index, raw_text) for index, item in enumerate(items)]


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and math.isfinite(value)


def _validate_candidate(item: Any, index: int, raw_text: str) -> SegmentCandidate:
    def fail(reason: str) -> ClassifierParseError:
        return ClassifierParseError(f"Segment at index {index}: {reason}", raw=raw_text)

    if not isinstance(item, dict):
        raise fail("must be an object")

    for field in _REQUIRED_FIELDS:
        if item.get(field) is None:
            raise fail(f"missing required field '{field}'")

    start, end, label = item["start"], item["end"], item["category"]
    if not _is_number(start):
        raise fail("start must be a number")
    if not _is_number(end):
        raise fail("end must be a number")
    if not isinstance(label, str) or not label.strip():
        raise fail("category must be a non-empty string")
    if start < 0:
        raise fail("start must be non-negative")
    if end <= start:
        raise fail("end must be greater than start")

    confidence = item.get("confidence")
    if confidence is not None:
        if not _is_number(confidence):
            raise fail("confidence must be a number")
        if not 0.0 <= confidence <= 1.0:
            raise fail("confidence must be between 0 and 1")

    description = item.get("description")
    if description is not None and not isinstance(description, str):
        raise fail("description must be a string")

    category = Category.from_label(label)
    if category is None:
        raise fail(f"unknown category '{label}'")

    return SegmentCandidate(
        start=float(start),
        end=float(end),
        category=category,
        raw_category=label,
        confidence=float(confidence) if confidence is not None else None,
        description=(description or "").strip(),
    )
