"""
Archive Store: the single source of truth for Dream Records.

Holds an in-memory list ordered newest first and mirrors every change to
a :class:`DreamStorage` backend. The backend is written first; memory is
only touched once the backend has accepted the change, so a failed write
leaves the list as it was.
"""

import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from dreamscape.core.exceptions import DreamNotFoundError, DreamscapeError
from dreamscape.core.models import DreamDraft, DreamRecord
from dreamscape.services.storage.backends import DreamStorage

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = frozenset({"user_title"})


class ArchiveStore:
    """In-memory view of the dream archive over a persistence backend.

    Args:
        storage: Backend that persists records across restarts.
    """

    def __init__(self, storage: DreamStorage) -> None:
        self._storage = storage
        self._dreams: list[DreamRecord] = []
        self._ready = False

    @property
    def storage(self) -> DreamStorage:
        return self._storage

    async def init(self) -> None:
        """Initialize the backend and load existing records."""
        await self._storage.init()
        records = await self._storage.load_all()
        records.sort(key=lambda r: r.created_at, reverse=True)
        self._dreams = records
        self._ready = True
        logger.info("Archive loaded: %d dream(s)", len(records))

    async def dispose(self) -> None:
        await self._storage.dispose()
        self._dreams = []
        self._ready = False

    def list(self) -> list[DreamRecord]:
        """Return a snapshot of all records, newest first."""
        return list(self._dreams)

    def get(self, dream_id: str) -> DreamRecord:
        for record in self._dreams:
            if record.id == dream_id:
                return record
        raise DreamNotFoundError(dream_id)

    def _new_id(self) -> str:
        taken = {record.id for record in self._dreams}
        while True:
            candidate = uuid.uuid4().hex
            if candidate not in taken:
                return candidate

    async def create(self, draft: DreamDraft) -> DreamRecord:
        """Persist *draft* as a new record and put it at the front of the list."""
        record = DreamRecord(
            id=self._new_id(),
            created_at=datetime.now(UTC),
            **draft.model_dump(),
        )
        await self._storage.insert(record)
        self._dreams.insert(0, record)
        logger.info("Dream archived: id=%s title=%r", record.id, record.ai_title)
        return record

    async def update(self, dream_id: str, fields: dict[str, Any]) -> DreamRecord:
        """Merge *fields* into an existing record.

        Raises:
            DreamNotFoundError: Unknown ``dream_id``.
            DreamscapeError: A field other than the user title was given.
        """
        illegal = set(fields) - MUTABLE_FIELDS
        if illegal:
            raise DreamscapeError(
                detail=f"Fields cannot be updated: {', '.join(sorted(illegal))}",
                code="IMMUTABLE_FIELD",
                status_code=400,
            )
        current = self.get(dream_id)
        await self._storage.update(dream_id, fields)
        updated = current.model_copy(update=fields)
        self._dreams = [updated if r.id == dream_id else r for r in self._dreams]
        return updated

    async def delete(self, dream_id: str) -> None:
        self.get(dream_id)
        await self._storage.delete(dream_id)
        self._dreams = [r for r in self._dreams if r.id != dream_id]
        logger.info("Dream deleted: id=%s", dream_id)
