"""Persistent key-value store contract."""

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Asynchronous string-keyed store with no transactions.

    Values must be JSON-serializable. Operations either complete or raise;
    callers wrap failures in their own error types.
    """

    async def get(self, keys: str | list[str] | None = None) -> dict[str, Any]:
        """Read entries.

        Args:
            keys: A key, a list of keys, or None for every entry.

        Returns:
            Mapping of found keys to values. Missing keys are omitted.
        """
        ...

    async def set(self, items: dict[str, Any]) -> None:
        """Write entries (last write wins)."""
        ...

    async def remove(self, keys: str | list[str]) -> None:
        """Delete entries by exact key. Missing keys are ignored."""
        ...


def normalize_keys(keys: str | list[str]) -> list[str]:
    if isinstance(keys, str):
        return [keys]
    return list(keys)
