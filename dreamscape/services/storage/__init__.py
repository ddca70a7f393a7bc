"""
Storage module - Dream archive persistence.

Factory function for building the Archive Store over the configured backend.
"""

from dreamscape.core.config import Settings
from dreamscape.services.storage.archive import ArchiveStore
from dreamscape.services.storage.backends import DatabaseStorage, DreamStorage, JsonFileStorage
from dreamscape.services.storage.local import LocalKeyValueStore

__all__ = ["ArchiveStore", "DreamStorage", "create_archive_store"]


def create_archive_store(settings: Settings, local_store: LocalKeyValueStore) -> ArchiveStore:
    """Build an (uninitialized) ArchiveStore for ``settings.archive_backend``.

    Args:
        settings: Application settings.
        local_store: The key-value file used by the ``local`` backend.

    Raises:
        ValueError: If the backend name is unknown.
    """
    backend = settings.archive_backend
    storage: DreamStorage
    if backend == "local":
        storage = JsonFileStorage(local_store)
    elif backend == "database":
        storage = DatabaseStorage(settings.database_url)
    else:
        raise ValueError(f"Unknown archive backend: {backend}")
    return ArchiveStore(storage)
