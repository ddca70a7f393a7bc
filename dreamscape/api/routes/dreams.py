"""
Dream archive REST endpoints.

CRUD over the injected :class:`ArchiveStore`; no business logic here.
"""

from fastapi import APIRouter, Depends

from dreamscape.api.dependencies import get_archive
from dreamscape.core.models import DeleteDreamResponse, DreamDraft, DreamRecord, DreamUpdate
from dreamscape.services.storage.archive import ArchiveStore

router = APIRouter(prefix="/dreams", tags=["dreams"])


@router.get("", response_model=list[DreamRecord])
async def list_dreams(archive: ArchiveStore = Depends(get_archive)):
    """List every dream, newest first."""
    return archive.list()


@router.post("", response_model=DreamRecord, status_code=201)
async def create_dream(body: DreamDraft, archive: ArchiveStore = Depends(get_archive)):
    return await archive.create(body)


@router.get("/{dream_id}", response_model=DreamRecord)
async def get_dream(dream_id: str, archive: ArchiveStore = Depends(get_archive)):
    return archive.get(dream_id)


@router.patch("/{dream_id}", response_model=DreamRecord)
async def update_dream(
    dream_id: str,
    body: DreamUpdate,
    archive: ArchiveStore = Depends(get_archive),
):
    """Rename a dream. A blank title clears it back to the AI title."""
    title = body.user_title.strip() if body.user_title else None
    return await archive.update(dream_id, {"user_title": title or None})


@router.delete("/{dream_id}", response_model=DeleteDreamResponse)
async def delete_dream(dream_id: str, archive: ArchiveStore = Depends(get_archive)):
    await archive.delete(dream_id)
    return DeleteDreamResponse(id=dream_id)
