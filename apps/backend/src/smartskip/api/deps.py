"""FastAPI dependencies."""

from __future__ import annotations

import logging

from smartskip.config import Settings
from smartskip.services.cache import CacheStore
from smartskip.services.factory import build_orchestrator
from smartskip.services.orchestrator import AnalysisOrchestrator

logger = logging.getLogger(__name__)

_orchestrator: AnalysisOrchestrator | None = None
_settings: Settings | None = None


def init_services(settings: Settings) -> AnalysisOrchestrator:
    """Initialize the global orchestrator (called at app startup)."""
    global _orchestrator, _settings
    _settings = settings
    _orchestrator = build_orchestrator(settings)
    logger.info("Services initialized: provider=%s store=%s", settings.provider, settings.store_path)
    return _orchestrator


def get_orchestrator() -> AnalysisOrchestrator:
    """Dependency that provides the AnalysisOrchestrator instance."""
    if _orchestrator is None:
        raise RuntimeError("Orchestrator not initialized, call init_services() first")
    return _orchestrator


def get_cache() -> CacheStore:
    """Dependency that provides the orchestrator's CacheStore."""
    return get_orchestrator().cache


def get_settings() -> Settings:
    """Dependency that provides the active Settings."""
    if _settings is None:
        raise RuntimeError("Settings not initialized, call init_services() first")
    return _settings
