"""Dreamer Profile persistence in the local key-value file."""

import logging

from dreamscape.core.models import DreamerProfile
from dreamscape.services.storage.local import LocalKeyValueStore

logger = logging.getLogger(__name__)


class ProfileStore:
    """Reads and writes the single Dreamer Profile under ``dreamer_profile``."""

    STORAGE_KEY = "dreamer_profile"

    def __init__(self, store: LocalKeyValueStore) -> None:
        self._store = store

    async def get(self) -> DreamerProfile:
        raw = await self._store.get(self.STORAGE_KEY)
        if not raw:
            return DreamerProfile()
        return DreamerProfile.model_validate(raw)

    async def save(self, profile: DreamerProfile) -> DreamerProfile:
        await self._store.set(self.STORAGE_KEY, profile.model_dump(mode="json"))
        logger.info("Dreamer profile saved")
        return profile

    async def clear(self) -> None:
        await self._store.remove(self.STORAGE_KEY)
