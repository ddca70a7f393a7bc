"""
CRUD repository for the ``dreams`` table.

``DreamRepository`` receives an ``AsyncSession`` and calls ``flush()``
rather than ``commit()`` so that transaction boundaries are controlled by
the caller (see :func:`session_scope`).
"""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dreamscape.core.exceptions import DreamNotFoundError
from dreamscape.core.models import DreamRecord
from dreamscape.services.storage.models_db import Dream

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back out
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def to_record(row: Dream) -> DreamRecord:
    """Convert an ORM row into the API-facing :class:`DreamRecord`."""
    return DreamRecord(
        id=row.id,
        user_title=row.user_title,
        ai_title=row.ai_title,
        ai_description=row.ai_description,
        transcript_raw=row.transcript_raw,
        transcript_json=row.transcript_json or {},
        video_url=row.video_url,
        video_thumbnail=row.video_thumbnail,
        created_at=_as_utc(row.created_at),
        emojis=list(row.emojis or []),
    )


class DreamRepository:
    """Data-access layer for Dream Records.

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_dream(self, record: DreamRecord) -> Dream:
        """Insert *record* and return the new row."""
        row = Dream(**record.model_dump())
        self._session.add(row)
        await self._session.flush()
        return row

    async def get_dream(self, dream_id: str) -> Dream:
        """Return a dream by ID or raise :class:`DreamNotFoundError`."""
        row = await self._session.get(Dream, dream_id)
        if row is None:
            raise DreamNotFoundError(dream_id)
        return row

    async def list_dreams(self) -> list[Dream]:
        """Return every dream, newest first."""
        stmt = select(Dream).order_by(Dream.created_at.desc())
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def update_dream(self, dream_id: str, fields: dict[str, Any]) -> Dream:
        """Apply *fields* to an existing dream and return it."""
        row = await self.get_dream(dream_id)
        for name, value in fields.items():
            setattr(row, name, value)
        await self._session.flush()
        return row

    async def delete_dream(self, dream_id: str) -> None:
        """Delete a dream or raise :class:`DreamNotFoundError`."""
        row = await self.get_dream(dream_id)
        await self._session.delete(row)
        await self._session.flush()
        logger.debug("Deleted dream row %s", dream_id)
