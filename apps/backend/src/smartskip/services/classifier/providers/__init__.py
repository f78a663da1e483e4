"""Classifier providers."""

from typing import Any

from smartskip.errors import ValidationError
from smartskip.services.classifier.base import IClassifierProvider
from smartskip.services.classifier.providers.claude import ClaudeProvider
from smartskip.services.classifier.providers.openai import OpenAIProvider

PROVIDERS: dict[str, type[ClaudeProvider] | type[OpenAIProvider]] = {
    "claude": ClaudeProvider,
    "openai": OpenAIProvider,
}


def create_provider(name: str, api_key: str | None = None, **options: Any) -> IClassifierProvider:
    """Create a provider by name.

    Raises:
        ValidationError: If the provider name is unknown.
    """
    provider_cls = PROVIDERS.get(name.lower())
    if provider_cls is None:
        raise ValidationError(
            f"Unknown provider type: {name}. Available: {', '.join(PROVIDERS)}",
            field="provider",
            value=name,
        )
    return provider_cls(api_key=api_key, **options)


def validate_provider_key(name: str, api_key: str | None) -> bool:
    """Check an API key against a provider's key format."""
    provider_cls = PROVIDERS.get(name.lower())
    if provider_cls is None:
        return False
    return provider_cls.validate_key(api_key)


__all__ = [
    "ClaudeProvider",
    "OpenAIProvider",
    "PROVIDERS",
    "create_provider",
    "validate_provider_key",
]
