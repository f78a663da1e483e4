"""Tests for classifier providers."""

from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from smartskip.errors import ClassifierParseError, ClassifierTimeoutError, ClassifierTransportError, ValidationError
from smartskip.services.classifier.providers import create_provider, validate_provider_key
from smartskip.services.classifier.providers.claude import ClaudeProvider
from smartskip.services.classifier.providers.openai import OpenAIProvider

CLAUDE_KEY = "sk-ant-api03-" + "a" * 40
OPENAI_KEY = "sk-proj-" + "b" * 40


class TestProviderFactory:
    def test_create_claude(self) -> None:
        provider = create_provider("claude", api_key=CLAUDE_KEY)
        assert isinstance(provider, ClaudeProvider)
        assert provider.is_available

    def test_create_openai_case_insensitive(self) -> None:
        assert isinstance(create_provider("OpenAI", api_key=OPENAI_KEY), OpenAIProvider)

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValidationError):
            create_provider("gemini")

    def test_validate_provider_key(self) -> None:
        assert validate_provider_key("claude", CLAUDE_KEY)
        assert not validate_provider_key("claude", OPENAI_KEY)
        assert validate_provider_key("openai", OPENAI_KEY)
        assert not validate_provider_key("openai", CLAUDE_KEY)
        assert not validate_provider_key("openai", "sk-short")
        assert not validate_provider_key("gemini", OPENAI_KEY)


class TestClaudeProvider:
    def test_unavailable_without_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert not ClaudeProvider().is_available

    def test_key_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", CLAUDE_KEY)
        assert ClaudeProvider().is_available

    def test_resolve_model(self) -> None:
        provider = ClaudeProvider(api_key=CLAUDE_KEY)
        assert provider.resolve_model("haiku") == "claude-3-5-haiku-20241022"
        assert provider.resolve_model("claude-opus-4-1") == "claude-opus-4-1"
        assert provider.resolve_model(None) == "claude-3-5-haiku-20241022"

    def test_create_payload(self) -> None:
        payload = ClaudeProvider(api_key=CLAUDE_KEY).create_payload("sys", "user", "sonnet")
        assert payload["model"] == "claude-sonnet-4-5-20250929"
        assert payload["system"] == "sys"
        assert payload["messages"] == [{"role": "user", "content": "user"}]
        assert payload["max_tokens"] == 4096

    @pytest.mark.asyncio
    async def test_send_request(self) -> None:
        provider = ClaudeProvider(api_key=CLAUDE_KEY)
        response = MagicMock()
        response.model_dump.return_value = {"content": [{"type": "text", "text": '{"segments": []}'}]}
        provider._client = MagicMock()
        provider._client.messages.create = AsyncMock(return_value=response)

        body = await provider.send_request({"model": "m", "messages": []})
        assert provider.parse_response(body) == '{"segments": []}'
        provider._client.messages.create.assert_awaited_once_with(model="m", messages=[])

    @pytest.mark.asyncio
    async def test_send_request_unavailable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(ClassifierTransportError) as exc_info:
            await ClaudeProvider().send_request({})
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_status_error_maps_to_transport_error(self) -> None:
        provider = ClaudeProvider(api_key=CLAUDE_KEY)
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        error = anthropic.RateLimitError(
            "rate limited", response=httpx.Response(429, request=request), body=None
        )
        provider._client = MagicMock()
        provider._client.messages.create = AsyncMock(side_effect=error)

        with pytest.raises(ClassifierTransportError) as exc_info:
            await provider.send_request({})
        assert exc_info.value.status_code == 429
        assert "Rate limit" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_timeout_maps_to_timeout_error(self) -> None:
        provider = ClaudeProvider(api_key=CLAUDE_KEY, timeout_seconds=3)
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        provider._client = MagicMock()
        provider._client.messages.create = AsyncMock(side_effect=anthropic.APITimeoutError(request=request))

        with pytest.raises(ClassifierTimeoutError):
            await provider.send_request({})

    def test_parse_response_without_text(self) -> None:
        with pytest.raises(ClassifierParseError):
            ClaudeProvider(api_key=CLAUDE_KEY).parse_response({"content": [{"type": "tool_use"}]})


def _openai_provider(handler) -> OpenAIProvider:
    return OpenAIProvider(api_key=OPENAI_KEY, transport=httpx.MockTransport(handler))


class TestOpenAIProvider:
    def test_create_payload(self) -> None:
        payload = OpenAIProvider(api_key=OPENAI_KEY).create_payload("sys", "user", None)
        assert payload["model"] == "gpt-4o-mini"
        assert payload["messages"][0] == {"role": "system", "content": "sys"}
        assert payload["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_send_request(self) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"choices": [{"message": {"content": '{"segments": []}'}}]})

        provider = _openai_provider(handler)
        body = await provider.send_request({"model": "gpt-4o-mini"})
        assert provider.parse_response(body) == '{"segments": []}'
        assert seen["auth"] == f"Bearer {OPENAI_KEY}"
        assert seen["url"] == "https://api.openai.com/v1/chat/completions"

    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": {"message": "Incorrect API key provided"}})

        with pytest.raises(ClassifierTransportError) as exc_info:
            await _openai_provider(handler).send_request({})
        assert exc_info.value.status_code == 401
        assert "Incorrect API key" in str(exc_info.value)
        assert "API key invalid" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="upstream down")

        with pytest.raises(ClassifierTransportError) as exc_info:
            await _openai_provider(handler).send_request({})
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ClassifierTimeoutError):
            await _openai_provider(handler).send_request({})

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ClassifierTransportError) as exc_info:
            await _openai_provider(handler).send_request({})
        assert exc_info.value.status_code is None

    def test_parse_response_without_choices(self) -> None:
        with pytest.raises(ClassifierParseError):
            OpenAIProvider(api_key=OPENAI_KEY).parse_response({"choices": []})
