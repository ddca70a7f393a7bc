"""Shared pytest fixtures for the Dreamscape test suite.

Provides mock LLM/STT/video providers, PCM/WAV audio samples, and
archive stores over both persistence backends.
"""

import io
import math
import struct
import wave
from unittest.mock import AsyncMock

import pytest

from dreamscape.core.models import TranscriptionResult

# ---------------------------------------------------------------------------
# Provider fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm():
    """Mock BaseLLM whose default reply is a small dream structure."""
    from dreamscape.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.generate.return_value = '{"title": "Flight", "description": "Soaring over mountains"}'
    return llm


@pytest.fixture
def mock_stt():
    """Mock BaseSTT returning a short English transcript."""
    from dreamscape.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = TranscriptionResult(
        text="I was flying over snowy mountains.", language="en", duration=3.2
    )
    return stt


@pytest.fixture
def mock_video():
    """Mock BaseVideoGenerator returning one video URL."""
    from dreamscape.services.video.base import BaseVideoGenerator

    video = AsyncMock(spec=BaseVideoGenerator)
    video.generate.return_value = ["https://videos.example/dream.mp4?alt=media&key=test"]
    return video


# ---------------------------------------------------------------------------
# Audio fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pcm_bytes():
    """1 second of 440 Hz sine-wave PCM (16 kHz, 16-bit, mono)."""
    sample_rate = 16000
    amplitude = 16000
    samples = [
        struct.pack("<h", int(amplitude * math.sin(2 * math.pi * 440.0 * i / sample_rate)))
        for i in range(sample_rate)
    ]
    return b"".join(samples)


@pytest.fixture
def silent_pcm_bytes():
    """1 second of silence (16 kHz, 16-bit, mono)."""
    return b"\x00\x00" * 16000


@pytest.fixture
def sample_wav_bytes(sample_pcm_bytes):
    """The sine-wave sample wrapped in a WAV container."""
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(16000)
        wf.writeframes(sample_pcm_bytes)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def local_store(tmp_path):
    from dreamscape.services.storage.local import LocalKeyValueStore

    return LocalKeyValueStore(tmp_path / "dreamscape.json")


@pytest.fixture(params=["local", "database"])
async def archive(request, tmp_path, local_store):
    """An initialized ArchiveStore over each backend in turn."""
    from dreamscape.services.storage.archive import ArchiveStore
    from dreamscape.services.storage.backends import DatabaseStorage, JsonFileStorage

    if request.param == "local":
        storage = JsonFileStorage(local_store)
    else:
        storage = DatabaseStorage(f"sqlite+aiosqlite:///{tmp_path / 'dreams.db'}")
    store = ArchiveStore(storage)
    await store.init()
    yield store
    await store.dispose()


@pytest.fixture
def make_draft():
    """Factory for DreamDraft objects with overridable fields."""
    from dreamscape.core.models import DreamDraft

    def _make(**overrides):
        fields = {
            "ai_title": "Flight",
            "ai_description": "Soaring over mountains",
            "transcript_raw": "I was flying over snowy mountains.",
            "transcript_json": {"title": "Flight", "description": "Soaring over mountains"},
            "video_url": "https://videos.example/dream.mp4?key=test",
            "video_thumbnail": "/static/dreambackground1.png",
            "emojis": ["\U0001f985", "\U0001f319"],
        }
        fields.update(overrides)
        return DreamDraft(**fields)

    return _make
