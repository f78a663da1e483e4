"""Classifier client: prompt building, transport with timeout, parsing."""

import asyncio
import logging
from collections.abc import Iterable

from smartskip.errors import ClassifierTimeoutError
from smartskip.models.category import Category
from smartskip.services.classifier.base import IClassifierProvider
from smartskip.services.classifier.parser import SegmentCandidate, parse_candidates
from smartskip.services.classifier.prompts import ClassifierPrompt, build_prompt

logger = logging.getLogger(__name__)


class ClassifierClient:
    """Wraps a provider with the classification protocol.

    The client owns the overall request timeout. Providers may enforce
    their own transport timeout as well, but the client deadline always
    applies.
    """

    def __init__(
        self,
        provider: IClassifierProvider,
        model: str | None = "haiku",
        timeout_seconds: float = 60.0,
    ) -> None:
        """Initialize the client.

        Args:
            provider: Provider implementation that talks to the model API.
            model: Model alias or full model id.
            timeout_seconds: Deadline for a single classification request.
        """
        self.provider = provider
        self.model = model
        self.timeout_seconds = timeout_seconds

    @property
    def provider_name(self) -> str:
        return self.provider.name

    @property
    def model_id(self) -> str:
        return self.provider.resolve_model(self.model)

    def build_prompt(
        self,
        transcript_text: str,
        enabled_categories: Iterable[Category] | None = None,
    ) -> ClassifierPrompt:
        return build_prompt(transcript_text, enabled_categories)

    async def send(self, prompt: ClassifierPrompt) -> str:
        """Send a prompt and return the raw completion text.

        Raises:
            ClassifierTimeoutError: If the deadline elapses.
            ClassifierTransportError: If the provider call fails.
            ClassifierParseError: If the provider response has no text.
        """
        payload = self.provider.create_payload(prompt.system, prompt.user, self.model)
        logger.info(
            "Classifier request: provider=%s model=%s categories=%s",
            self.provider_name,
            payload.get("model"),
            ",".join(c.prompt_key for c in prompt.categories),
        )
        try:
            response = await asyncio.wait_for(self.provider.send_request(payload), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            logger.warning("Classifier request timed out after %.1fs", self.timeout_seconds)
            raise ClassifierTimeoutError(self.timeout_seconds) from exc

        return self.provider.parse_response(response)

    def parse_response(self, raw_text: str) -> list[SegmentCandidate]:
        candidates = parse_candidates(raw_text)
        logger.debug("Parsed %d candidates from classifier output", len(candidates))
        return candidates

    @staticmethod
    def filter_by_confidence(candidates: list[SegmentCandidate], threshold: float) -> list[SegmentCandidate]:
        """Keep candidates whose confidence is at or above ``threshold``."""
        kept = [c for c in candidates if c.meets_threshold(threshold)]
        if len(kept) != len(candidates):
            logger.debug("Confidence filter dropped %d of %d candidates", len(candidates) - len(kept), len(candidates))
        return kept

    async def classify(
        self,
        transcript_text: str,
        enabled_categories: Iterable[Category] | None = None,
    ) -> list[SegmentCandidate]:
        """Build a prompt, send it, and parse the result."""
        prompt = self.build_prompt(transcript_text, enabled_categories)
        raw = await self.send(prompt)
        return self.parse_response(raw)

    async def test_connection(self) -> bool:
        """Send a trivial request to check that the provider answers."""
        if not self.provider.is_available:
            return False
        try:
            await self.send(build_prompt("[0s] connection test"))
        except Exception as exc:
            logger.warning("Classifier connection test failed: %s", exc)
            return False
        return True
