"""Integration test fixtures for Dreamscape.

Runs the real application lifespan against a temporary local store, with
the AI providers replaced by the shared mocks. Provides an async HTTP
client and a sync TestClient (for WebSocket).
"""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from dreamscape.core.config import Settings
from dreamscape.services.gateway import DreamServices

PLACEHOLDER = "/static/dreambackground1.png"


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        _env_file=None,
        archive_backend="local",
        local_store_path=str(tmp_path / "dreamscape.json"),
        chunk_interval_ms=100,
        max_recording_ms=5000,
        log_level="WARNING",
    )


@pytest.fixture
def services(mock_stt, mock_llm, mock_video):
    # 64 KiB ceiling keeps the oversize case cheap
    return DreamServices(
        stt=mock_stt, llm=mock_llm, video=mock_video, max_audio_bytes=64 * 1024
    )


@pytest.fixture
def thumbnails():
    extractor = AsyncMock()
    extractor.extract.return_value = PLACEHOLDER
    return extractor


@pytest.fixture
def app(monkeypatch, test_settings, services, thumbnails):
    """A fresh FastAPI application wired to the test settings and mocks."""
    import dreamscape.api.app as app_module

    monkeypatch.setattr(app_module, "get_settings", lambda: test_settings)
    monkeypatch.setattr(DreamServices, "from_settings", lambda settings: services)
    monkeypatch.setattr(app_module, "ThumbnailExtractor", lambda placeholder: thumbnails)
    return app_module.create_app()


@pytest.fixture
async def async_client(app):
    """AsyncClient over ASGITransport; the lifespan is entered by hand."""
    from dreamscape.api.app import lifespan

    async with lifespan(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c


@pytest.fixture
def test_client(app):
    """Synchronous TestClient for WebSocket tests."""
    with TestClient(app) as c:
        yield c
