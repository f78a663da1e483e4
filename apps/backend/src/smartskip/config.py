"""Configuration management for SmartSkip."""

from datetime import timedelta
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from smartskip.models.preferences import SkipPreferences


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SMARTSKIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Storage
    store_path: Path = Path("./data/smartskip-store.json")
    cache_key_prefix: str = "analysis_"
    cache_max_age_days: int = Field(default=30, ge=1)

    # Classifier
    provider: str = "claude"
    model: str = "haiku"
    anthropic_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SMARTSKIP_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"),
    )
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SMARTSKIP_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    classifier_timeout_seconds: float = Field(default=60.0, gt=0)

    # Default user preferences
    confidence_threshold: float = Field(default=0.85, ge=0.0, le=1.0)
    skip_buffer_seconds: float = Field(default=0.5, ge=0.0, le=10.0)
    enable_preview: bool = True
    auto_skip: bool = True
    refilter_cached_confidence: bool = False

    # Logging
    log_level: str = "INFO"

    @property
    def cache_max_age(self) -> timedelta:
        return timedelta(days=self.cache_max_age_days)

    def api_key_for(self, provider: str | None = None) -> str | None:
        """Return the configured API key for a provider."""
        name = (provider or self.provider).lower()
        if name == "openai":
            return self.openai_api_key
        return self.anthropic_api_key

    def default_preferences(self) -> SkipPreferences:
        """Build user preferences seeded from these settings."""
        return SkipPreferences(
            confidence_threshold=self.confidence_threshold,
            skip_buffer=self.skip_buffer_seconds,
            enable_preview=self.enable_preview,
            auto_skip=self.auto_skip,
        )

    def ensure_directories(self) -> None:
        """Create the store directory if it doesn't exist."""
        self.store_path.parent.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
