"""Persistent key-value stores."""

from smartskip.storage.base import KeyValueStore
from smartskip.storage.json_file import JsonFileStore
from smartskip.storage.memory import InMemoryKeyValueStore

__all__ = ["KeyValueStore", "InMemoryKeyValueStore", "JsonFileStore"]
