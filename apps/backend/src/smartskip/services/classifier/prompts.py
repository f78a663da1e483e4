"""Prompt construction for segment classification."""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from smartskip.models.category import ALL_CATEGORIES, Category

_SYSTEM_PROMPT = """\
You are an assistant that analyzes video transcripts to find segments a viewer may want to skip.

Identify segments that belong to these categories, and only these:
{category_lines}

Examples of what counts:
{positive_examples}

Examples of what must NOT be flagged:
- A brief, incidental mention of a brand or product inside genuine content (e.g. "I'm using my old Nikon for this shot").
- The creator discussing a product they are reviewing, when the review is the topic of the video.
- Content that merely sounds promotional but is part of the story, tutorial or argument.
- Categories not listed above, even if you are confident about them.

Return ONLY a valid JSON object in this exact format:
{{
  "segments": [
    {{
      "start": <integer seconds>,
      "end": <integer seconds>,
      "category": "<one of: {category_keys}>",
      "confidence": <number between 0 and 1>,
      "description": "<brief description>"
    }}
  ]
}}

Rules:
- Times are whole seconds taken from the transcript timestamps; end must be greater than start.
- category must be exactly one of the listed identifiers.
- confidence reflects how certain you are that the whole range belongs to the category.
- Only include segments you are confident about.
- Return {{"segments": []}} if nothing qualifies.
"""

_USER_MESSAGE = """\
Analyze this video transcript and identify segments to skip:

{transcript}

Return the analysis as JSON."""

_POSITIVE_EXAMPLES: dict[Category, str] = {
    Category.SPONSOR: '- sponsorships: "This video is brought to you by NordVPN. Use code CREATOR for 20% off..."',
    Category.INTRO: '- intro: "Hey everyone, welcome back to the channel! Before we start, let me tell you what today is about..."',
    Category.OUTRO: '- outro: "That\'s it for today, thanks for watching, see you in the next one!"',
    Category.DONATIONS: '- donations: "Huge thanks to Mark for the $10 super chat and to all my patrons..."',
    Category.SELF_PROMO: '- channel_self_promo: "Don\'t forget to subscribe, and check out my new merch store linked below..."',
}


class ClassifierPrompt(BaseModel):
    """System instruction plus user message for one classification."""

    model_config = ConfigDict(frozen=True)

    system: str
    user: str
    categories: tuple[Category, ...]


def build_system_prompt(categories: Iterable[Category] | None = None) -> str:
    """Build the system instruction for the given categories.

    All categories are used when ``categories`` is None or empty.
    """
    selected = _select(categories)
    return _SYSTEM_PROMPT.format(
        category_lines="\n".join(f"- {c.prompt_key}: {c.prompt_description}" for c in selected),
        positive_examples="\n".join(_POSITIVE_EXAMPLES[c] for c in selected),
        category_keys=", ".join(c.prompt_key for c in selected),
    )


def build_user_message(transcript_text: str) -> str:
    return _USER_MESSAGE.format(transcript=transcript_text.strip())


def build_prompt(transcript_text: str, categories: Iterable[Category] | None = None) -> ClassifierPrompt:
    selected = _select(categories)
    return ClassifierPrompt(
        system=build_system_prompt(selected),
        user=build_user_message(transcript_text),
        categories=selected,
    )


def _select(categories: Iterable[Category] | None) -> tuple[Category, ...]:
    chosen = set(categories or ())
    if not chosen:
        return ALL_CATEGORIES
    # Keep canonical order regardless of caller ordering.
    return tuple(c for c in ALL_CATEGORIES if c in chosen)
