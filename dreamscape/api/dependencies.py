"""FastAPI dependencies resolving the per-app services held on ``app.state``."""

from fastapi import Request

from dreamscape.services.gateway import DreamServices
from dreamscape.services.storage.archive import ArchiveStore
from dreamscape.services.storage.profile import ProfileStore


def get_services(request: Request) -> DreamServices:
    return request.app.state.services


def get_archive(request: Request) -> ArchiveStore:
    return request.app.state.archive


def get_profile_store(request: Request) -> ProfileStore:
    return request.app.state.profiles
