"""Tests for settings."""

from datetime import timedelta

import pytest

from smartskip.api import deps
from smartskip.config import Settings
from smartskip.services.factory import build_orchestrator


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        settings = Settings(_env_file=None)
        assert settings.provider == "claude"
        assert settings.cache_key_prefix == "analysis_"
        assert settings.cache_max_age == timedelta(days=30)
        assert settings.classifier_timeout_seconds == 60.0
        assert settings.anthropic_api_key is None

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SMARTSKIP_PROVIDER", "openai")
        monkeypatch.setenv("SMARTSKIP_CONFIDENCE_THRESHOLD", "0.7")
        settings = Settings(_env_file=None)
        assert settings.provider == "openai"
        assert settings.confidence_threshold == 0.7

    def test_vendor_key_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-from-env")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai-from-env")
        settings = Settings(_env_file=None)
        assert settings.api_key_for("claude") == "sk-ant-from-env"
        assert settings.api_key_for("openai") == "sk-openai-from-env"

    def test_default_preferences(self) -> None:
        prefs = Settings(_env_file=None, confidence_threshold=0.9, skip_buffer_seconds=2.0).default_preferences()
        assert prefs.confidence_threshold == 0.9
        assert prefs.skip_buffer == 2.0
        assert prefs.skip_sponsors

    def test_invalid_threshold(self) -> None:
        with pytest.raises(ValueError):
            Settings(_env_file=None, confidence_threshold=1.5)


class TestServiceWiring:
    def test_build_orchestrator(self, tmp_path) -> None:
        settings = Settings(
            _env_file=None,
            provider="openai",
            store_path=tmp_path / "store.json",
            openai_api_key="sk-" + "x" * 30,
        )
        orchestrator = build_orchestrator(settings)
        assert orchestrator.client.provider_name == "openai"
        assert orchestrator.client.provider.is_available
        assert orchestrator.events is not None
        assert orchestrator.events.listener_count == 1

    def test_init_services(self, tmp_path) -> None:
        settings = Settings(_env_file=None, store_path=tmp_path / "store.json")
        orchestrator = deps.init_services(settings)
        assert deps.get_orchestrator() is orchestrator
        assert deps.get_cache() is orchestrator.cache
        assert deps.get_settings() is settings
