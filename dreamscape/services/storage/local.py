"""
Single-file key-value store.

Holds a handful of JSON values under fixed keys in one JSON document on
disk, much like browser local storage. Every write rewrites the whole
document through a temp file and an atomic rename.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class LocalKeyValueStore:
    """JSON-file backed key-value store.

    Args:
        path: Location of the JSON document; created on first write.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()
        self._data: dict[str, Any] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        raw = self._path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not hold a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self._path)

    async def _loaded(self) -> dict[str, Any]:
        if self._data is None:
            self._data = await asyncio.to_thread(self._read)
            logger.debug("Loaded %d key(s) from %s", len(self._data), self._path)
        return self._data

    async def get(self, key: str, default: Any = None) -> Any:
        async with self._lock:
            data = await self._loaded()
            return data.get(key, default)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = await self._loaded()
            data[key] = value
            await asyncio.to_thread(self._write, dict(data))

    async def remove(self, key: str) -> None:
        async with self._lock:
            data = await self._loaded()
            if key in data:
                del data[key]
                await asyncio.to_thread(self._write, dict(data))
