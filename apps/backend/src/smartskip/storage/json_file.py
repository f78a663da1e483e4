"""Key-value store persisted to a single JSON file."""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from smartskip.storage.base import normalize_keys

logger = logging.getLogger(__name__)


class JsonFileStore:
    """Store every entry in one JSON document on disk.

    Blocking file IO runs in a worker thread. Read-modify-write cycles
    are serialized within this process; the file is replaced atomically
    so a crash never leaves a half-written document.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Store file {self.path} does not contain a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def get(self, keys: str | list[str] | None = None) -> dict[str, Any]:
        data = await asyncio.to_thread(self._read)
        if keys is None:
            return data
        return {k: data[k] for k in normalize_keys(keys) if k in data}

    async def set(self, items: dict[str, Any]) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            data.update(items)
            await asyncio.to_thread(self._write, data)
        logger.debug("Wrote %d key(s) to %s", len(items), self.path)

    async def remove(self, keys: str | list[str]) -> None:
        targets = normalize_keys(keys)
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            removed = [k for k in targets if k in data]
            for key in removed:
                del data[key]
            if removed:
                await asyncio.to_thread(self._write, data)
        logger.debug("Removed %d key(s) from %s", len(removed), self.path)
