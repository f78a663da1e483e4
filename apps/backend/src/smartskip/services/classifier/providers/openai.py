"""OpenAI classifier provider."""

import logging
import os
from typing import Any

import httpx

from smartskip.errors import ClassifierParseError, ClassifierTimeoutError, ClassifierTransportError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
_MODELS = {
    "gpt-4o": "gpt-4o",
    "gpt-4o-mini": "gpt-4o-mini",
    "gpt-4-turbo": "gpt-4-turbo",
}
_DEFAULT_ALIAS = "gpt-4o-mini"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.reason_phrase


class OpenAIProvider:
    """Classifier provider using the OpenAI chat completions endpoint over httpx."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_seconds: float = 60.0,
        max_tokens: int = 4096,
        temperature: float = 0.3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the OpenAI provider.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
            base_url: Override for the chat completions URL.
            timeout_seconds: HTTP timeout.
            max_tokens: Completion token cap.
            temperature: Sampling temperature.
            transport: Optional httpx transport (used by tests).
        """
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self._base_url = base_url or DEFAULT_ENDPOINT
        self._timeout = timeout_seconds
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._transport = transport
        self._available = self.validate_key(self._api_key)

        if not self._available:
            logger.warning("OpenAIProvider: no valid API key, provider unavailable")

    @property
    def name(self) -> str:
        return "openai"

    @property
    def is_available(self) -> bool:
        return self._available

    def available_models(self) -> dict[str, str]:
        return dict(_MODELS)

    def resolve_model(self, model: str | None) -> str:
        if model in _MODELS:
            return _MODELS[model]
        return _MODELS[_DEFAULT_ALIAS]

    @staticmethod
    def validate_key(api_key: str | None) -> bool:
        """OpenAI keys start with ``sk-`` (but not Claude's ``sk-ant-``)."""
        return (
            isinstance(api_key, str)
            and api_key.startswith("sk-")
            and not api_key.startswith("sk-ant-")
            and len(api_key) >= 20
        )

    def create_payload(self, system_prompt: str, user_message: str, model: str | None) -> dict[str, Any]:
        return {
            "model": self.resolve_model(model),
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "response_format": {"type": "json_object"},
        }

    async def send_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        if not self._available:
            raise ClassifierTransportError("OpenAI provider is not available (no API key)", status_code=401)

        headers = {"Authorization": f"Bearer {self._api_key}"}
        logger.debug("Sending request to OpenAI API (model=%s)", payload.get("model"))
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(self._base_url, json=payload, headers=headers)
            except httpx.TimeoutException as exc:
                raise ClassifierTimeoutError(self._timeout) from exc
            except httpx.RequestError as exc:
                raise ClassifierTransportError(f"OpenAI request failed: {exc}") from exc

        if response.is_error:
            raise ClassifierTransportError(
                f"OpenAI API error: {_error_detail(response)}", status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ClassifierParseError("OpenAI returned a non-JSON body", raw=response.text) from exc

    def parse_response(self, response: dict[str, Any]) -> str:
        try:
            content = response["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ClassifierParseError("No message content in OpenAI response", raw=str(response)) from exc
        if not isinstance(content, str) or not content.strip():
            raise ClassifierParseError("No message content in OpenAI response", raw=str(response))
        return content
