"""Transcript segment classification."""

from smartskip.services.classifier.base import IClassifierProvider
from smartskip.services.classifier.client import ClassifierClient
from smartskip.services.classifier.parser import SegmentCandidate, parse_candidates
from smartskip.services.classifier.prompts import ClassifierPrompt, build_prompt
from smartskip.services.classifier.providers import create_provider, validate_provider_key

__all__ = [
    "ClassifierClient",
    "ClassifierPrompt",
    "IClassifierProvider",
    "SegmentCandidate",
    "build_prompt",
    "create_provider",
    "parse_candidates",
    "validate_provider_key",
]
