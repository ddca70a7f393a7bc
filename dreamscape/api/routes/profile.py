"""Dreamer profile endpoints."""

from fastapi import APIRouter, Depends

from dreamscape.api.dependencies import get_profile_store
from dreamscape.core.models import DreamerProfile
from dreamscape.services.storage.profile import ProfileStore

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=DreamerProfile)
async def get_profile(profiles: ProfileStore = Depends(get_profile_store)):
    return await profiles.get()


@router.put("", response_model=DreamerProfile)
async def save_profile(body: DreamerProfile, profiles: ProfileStore = Depends(get_profile_store)):
    return await profiles.save(body)
