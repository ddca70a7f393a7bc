"""
Persistence backends for the Archive Store.

Two interchangeable variants sit behind :class:`DreamStorage`:

- ``JsonFileStorage`` keeps every record in one JSON document under the
  ``dreams`` key of a :class:`LocalKeyValueStore` and rewrites it on each
  change.
- ``DatabaseStorage`` keeps one row per record in the ``dreams`` table via
  async SQLAlchemy.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from dreamscape.core.exceptions import DreamNotFoundError
from dreamscape.core.models import DreamRecord
from dreamscape.services.storage.database import (
    build_engine,
    build_session_factory,
    init_db,
    session_scope,
)
from dreamscape.services.storage.local import LocalKeyValueStore
from dreamscape.services.storage.repository import DreamRepository, to_record

logger = logging.getLogger(__name__)


class DreamStorage(ABC):
    """Abstract persistence backend for Dream Records."""

    async def init(self) -> None:
        """Prepare the backend (open connections, create schema)."""

    async def dispose(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def load_all(self) -> list[DreamRecord]:
        """Return every persisted record in any order."""

    @abstractmethod
    async def insert(self, record: DreamRecord) -> None: ...

    @abstractmethod
    async def update(self, dream_id: str, fields: dict[str, Any]) -> None: ...

    @abstractmethod
    async def delete(self, dream_id: str) -> None: ...


class JsonFileStorage(DreamStorage):
    """All records serialized together under one key of a local JSON file."""

    STORAGE_KEY = "dreams"

    def __init__(self, store: LocalKeyValueStore) -> None:
        self._store = store

    async def _read(self) -> list[dict[str, Any]]:
        return list(await self._store.get(self.STORAGE_KEY, []))

    async def load_all(self) -> list[DreamRecord]:
        return [DreamRecord.model_validate(item) for item in await self._read()]

    async def insert(self, record: DreamRecord) -> None:
        items = await self._read()
        items.insert(0, record.model_dump(mode="json"))
        await self._store.set(self.STORAGE_KEY, items)

    async def update(self, dream_id: str, fields: dict[str, Any]) -> None:
        items = await self._read()
        ids = [item.get("id") for item in items]
        if dream_id not in ids:
            raise DreamNotFoundError(dream_id)
        # copy before merging; the store caches the loaded dicts
        index = ids.index(dream_id)
        items[index] = {**items[index], **fields}
        await self._store.set(self.STORAGE_KEY, items)

    async def delete(self, dream_id: str) -> None:
        items = await self._read()
        remaining = [item for item in items if item.get("id") != dream_id]
        if len(remaining) == len(items):
            raise DreamNotFoundError(dream_id)
        await self._store.set(self.STORAGE_KEY, remaining)


class DatabaseStorage(DreamStorage):
    """One row per record in the ``dreams`` table."""

    def __init__(self, url: str) -> None:
        self._url = url
        self._engine: AsyncEngine | None = None
        self._factory: async_sessionmaker[AsyncSession] | None = None

    async def init(self) -> None:
        self._engine = build_engine(self._url)
        self._factory = build_session_factory(self._engine)
        await init_db(self._engine)
        logger.info("Dream database ready")

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._factory = None

    def _sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._factory is None:
            raise RuntimeError("DatabaseStorage used before init()")
        return self._factory

    async def load_all(self) -> list[DreamRecord]:
        async with session_scope(self._sessions()) as session:
            rows = await DreamRepository(session).list_dreams()
            return [to_record(row) for row in rows]

    async def insert(self, record: DreamRecord) -> None:
        async with session_scope(self._sessions()) as session:
            await DreamRepository(session).create_dream(record)

    async def update(self, dream_id: str, fields: dict[str, Any]) -> None:
        async with session_scope(self._sessions()) as session:
            await DreamRepository(session).update_dream(dream_id, fields)

    async def delete(self, dream_id: str) -> None:
        async with session_scope(self._sessions()) as session:
            await DreamRepository(session).delete_dream(dream_id)
