"""In-process key-value store."""

import json
from typing import Any

from smartskip.storage.base import normalize_keys


class InMemoryKeyValueStore:
    """Dict-backed store.

    Values are round-tripped through JSON on write and read so callers
    never share mutable state with the store, mirroring a serializing
    backend.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._data[key] = json.dumps(value)

    def __len__(self) -> int:
        return len(self._data)

    async def get(self, keys: str | list[str] | None = None) -> dict[str, Any]:
        if keys is None:
            selected = list(self._data)
        else:
            selected = [k for k in normalize_keys(keys) if k in self._data]
        return {k: json.loads(self._data[k]) for k in selected}

    async def set(self, items: dict[str, Any]) -> None:
        encoded = {k: json.dumps(v) for k, v in items.items()}
        self._data.update(encoded)

    async def remove(self, keys: str | list[str]) -> None:
        for key in normalize_keys(keys):
            self._data.pop(key, None)
