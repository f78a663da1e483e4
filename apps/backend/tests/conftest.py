"""Shared fixtures."""

import asyncio
import json
from typing import Any

import pytest

from smartskip.models.transcript import Transcript
from smartskip.services.cache import CacheStore
from smartskip.services.classifier.client import ClassifierClient
from smartskip.storage.memory import InMemoryKeyValueStore


class FakeProvider:
    """Provider double that returns canned completions and counts calls."""

    def __init__(self, completion: str = '{"segments": []}', delay: float = 0.0, error: Exception | None = None):
        self.completion = completion
        self.delay = delay
        self.error = error
        self.calls: list[dict[str, Any]] = []

    @property
    def name(self) -> str:
        return "fake"

    @property
    def is_available(self) -> bool:
        return True

    def available_models(self) -> dict[str, str]:
        return {"fake": "fake-model-1"}

    def resolve_model(self, model: str | None) -> str:
        return "fake-model-1"

    def validate_key(self, api_key: str | None) -> bool:
        return bool(api_key)

    def create_payload(self, system_prompt: str, user_message: str, model: str | None) -> dict[str, Any]:
        return {"model": self.resolve_model(model), "system": system_prompt, "user": user_message}

    async def send_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(payload)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return {"text": self.completion}

    def parse_response(self, response: dict[str, Any]) -> str:
        return response["text"]


def completion(*segments: dict[str, Any]) -> str:
    return json.dumps({"segments": list(segments)})


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def cache(store: InMemoryKeyValueStore) -> CacheStore:
    return CacheStore(store)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def client(fake_provider: FakeProvider) -> ClassifierClient:
    return ClassifierClient(fake_provider, model="fake", timeout_seconds=5.0)


@pytest.fixture
def transcript() -> Transcript:
    return Transcript.from_lines(
        "abc",
        [
            {"time": 0, "text": "Hey everyone, welcome back to the channel."},
            {"time": 12, "text": "This video is brought to you by NordVPN."},
            {"time": 45, "text": "Today we are building a bookshelf from scratch."},
            {"time": 600, "text": "Thanks for watching, see you next time."},
        ],
    )
