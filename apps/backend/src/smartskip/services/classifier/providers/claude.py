"""Claude classifier provider."""

import logging
import os
from typing import Any

import anthropic

from smartskip.errors import ClassifierParseError, ClassifierTimeoutError, ClassifierTransportError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.anthropic.com"
_MODELS = {
    "haiku": "claude-3-5-haiku-20241022",
    "sonnet": "claude-sonnet-4-5-20250929",
}
_DEFAULT_ALIAS = "haiku"


class ClaudeProvider:
    """Classifier provider using the Anthropic Messages API.

    Uses the anthropic Python SDK. A missing or malformed API key marks
    the provider unavailable rather than failing construction.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_seconds: float = 60.0,
        max_tokens: int = 4096,
        temperature: float = 0.3,
    ) -> None:
        """Initialize the Claude provider.

        Args:
            api_key: Anthropic API key. Falls back to ANTHROPIC_API_KEY env var.
            base_url: Override for the API endpoint.
            timeout_seconds: Transport timeout passed to the SDK.
            max_tokens: Completion token cap.
            temperature: Sampling temperature.
        """
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._timeout = timeout_seconds
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._available = self.validate_key(self._api_key)

        if self._available:
            self._client = anthropic.AsyncAnthropic(
                api_key=self._api_key,
                base_url=base_url or DEFAULT_ENDPOINT,
                timeout=timeout_seconds,
                max_retries=0,
            )
        else:
            self._client = None
            logger.warning("ClaudeProvider: no valid API key, provider unavailable")

    @property
    def name(self) -> str:
        return "claude"

    @property
    def is_available(self) -> bool:
        return self._available

    def available_models(self) -> dict[str, str]:
        return dict(_MODELS)

    def resolve_model(self, model: str | None) -> str:
        if model in _MODELS:
            return _MODELS[model]
        if model and model.startswith("claude-"):
            return model
        return _MODELS[_DEFAULT_ALIAS]

    @staticmethod
    def validate_key(api_key: str | None) -> bool:
        """Claude keys start with ``sk-ant-``."""
        return isinstance(api_key, str) and api_key.startswith("sk-ant-") and len(api_key) >= 20

    def create_payload(self, system_prompt: str, user_message: str, model: str | None) -> dict[str, Any]:
        return {
            "model": self.resolve_model(model),
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_message}],
        }

    async def send_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        if not self._available or self._client is None:
            raise ClassifierTransportError("Claude provider is not available (no API key)", status_code=401)

        logger.debug("Sending request to Claude API (model=%s)", payload.get("model"))
        try:
            response = await self._client.messages.create(**payload)
        except anthropic.APITimeoutError as exc:
            raise ClassifierTimeoutError(self._timeout) from exc
        except anthropic.APIStatusError as exc:
            raise ClassifierTransportError(
                f"Claude API error: {exc.message}", status_code=exc.status_code
            ) from exc
        except anthropic.APIError as exc:
            raise ClassifierTransportError(f"Claude API error: {exc}") from exc

        return response.model_dump()

    def parse_response(self, response: dict[str, Any]) -> str:
        text = "".join(
            block.get("text", "")
            for block in response.get("content") or []
            if isinstance(block, dict) and block.get("type") == "text"
        )
        if not text.strip():
            raise ClassifierParseError("No text content in Claude response", raw=str(response))
        return text
