"""Wiring of services from settings."""

from smartskip.config import Settings
from smartskip.services.cache import CacheStore
from smartskip.services.classifier.client import ClassifierClient
from smartskip.services.classifier.providers import create_provider
from smartskip.services.events import EventBus
from smartskip.services.orchestrator import AnalysisOrchestrator
from smartskip.services.stats import SkipStatsRecorder
from smartskip.storage.base import KeyValueStore
from smartskip.storage.json_file import JsonFileStore


def build_store(settings: Settings) -> KeyValueStore:
    return JsonFileStore(settings.store_path)


def build_cache(settings: Settings, store: KeyValueStore | None = None) -> CacheStore:
    return CacheStore(
        store or build_store(settings),
        key_prefix=settings.cache_key_prefix,
        max_age=settings.cache_max_age,
    )


def build_orchestrator(settings: Settings, store: KeyValueStore | None = None) -> AnalysisOrchestrator:
    """Wire store, cache, classifier and the stats listener."""
    store = store or build_store(settings)
    provider = create_provider(
        settings.provider,
        api_key=settings.api_key_for(settings.provider),
        timeout_seconds=settings.classifier_timeout_seconds,
    )
    client = ClassifierClient(provider, model=settings.model, timeout_seconds=settings.classifier_timeout_seconds)

    events = EventBus()
    events.subscribe(SkipStatsRecorder(store).handle_event)
    return AnalysisOrchestrator(
        build_cache(settings, store),
        client,
        events=events,
        refilter_cached_confidence=settings.refilter_cached_confidence,
    )
