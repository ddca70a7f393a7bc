"""
Service gateway: the AI operations shared by the HTTP routes and the
recording session.

Wraps the STT, LLM and video providers behind a single object so that
callers deal with audio bytes and transcripts, never provider SDKs.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from dreamscape.core.config import Settings
from dreamscape.core.exceptions import TranscriptRequiredError
from dreamscape.core.models import (
    DEFAULT_EMOJI,
    TranscribeResponse,
    TranscriptionResult,
    VideoOptions,
)
from dreamscape.core.utils import sniff_audio_extension
from dreamscape.services.analysis import DreamStructurer, EmojiDetector
from dreamscape.services.audio.processor import validate_audio_size
from dreamscape.services.llm import BaseLLM, create_llm
from dreamscape.services.transcription import BaseSTT, create_stt
from dreamscape.services.video import BaseVideoGenerator, create_video_generator

logger = logging.getLogger(__name__)


class DreamServices:
    """Transcription, emoji, structuring and video behind one facade.

    Args:
        stt: Speech-to-text provider.
        llm: Text model used for emoji detection and structuring.
        video: Text-to-video provider.
        min_audio_bytes: Uploads smaller than this are rejected.
        max_audio_bytes: Uploads larger than this are rejected.
    """

    def __init__(
        self,
        stt: BaseSTT,
        llm: BaseLLM,
        video: BaseVideoGenerator,
        min_audio_bytes: int = 1024,
        max_audio_bytes: int = 50 * 1024 * 1024,
    ) -> None:
        self._stt = stt
        self._video = video
        self._emoji = EmojiDetector(llm)
        self._structurer = DreamStructurer(llm)
        self._min_audio_bytes = min_audio_bytes
        self._max_audio_bytes = max_audio_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> "DreamServices":
        """Build providers from configuration."""
        return cls(
            stt=create_stt(settings.stt_provider),
            llm=create_llm(settings.llm_provider),
            video=create_video_generator(settings.video_provider),
            min_audio_bytes=settings.min_chunk_bytes,
            max_audio_bytes=settings.max_audio_bytes,
        )

    async def transcribe(
        self,
        audio: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> TranscriptionResult:
        """Validate *audio* and transcribe it.

        Raises:
            AudioValidationError: Audio too small or too large.
            TranscriptionError: The provider failed.
        """
        validate_audio_size(len(audio), self._min_audio_bytes, self._max_audio_bytes)
        extension = sniff_audio_extension(content_type, filename)
        stamp = datetime.now(UTC).strftime("%Y%m%d%H%M%S%f")
        name = f"{stamp}-audio.{extension}"
        logger.info("Transcribing %s (%d bytes)", name, len(audio))
        return await self._stt.transcribe(audio, name)

    async def transcribe_with_emoji(
        self,
        audio: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> TranscribeResponse:
        """Transcribe *audio* and pick an emoji for the resulting text."""
        result = await self.transcribe(audio, filename, content_type)
        if result.text.strip():
            emoji = await self._emoji.detect(result.text)
        else:
            emoji = DEFAULT_EMOJI
        return TranscribeResponse(success=True, result=result, emoji=emoji)

    async def detect_emoji(self, transcript: str | None) -> str:
        return await self._emoji.detect(transcript)

    async def structure(self, transcript: str | None) -> dict[str, Any] | None:
        """Structure a transcript into the dream schema.

        Raises:
            TranscriptRequiredError: Missing or blank transcript.
            StructuringError: The provider failed.
        """
        if not transcript or not transcript.strip():
            raise TranscriptRequiredError()
        return await self._structurer.structure(transcript)

    async def generate_video(
        self,
        prompt: str | dict[str, Any] | None,
        options: VideoOptions | None = None,
    ) -> list[str]:
        """Generate video(s) for a prompt string or structured dream.

        Raises:
            TranscriptRequiredError: Missing or blank prompt.
            VideoGenerationError: The provider failed or reported an error.
            VideoGenerationTimeoutError: The job did not finish in time.
        """
        if not prompt or (isinstance(prompt, str) and not prompt.strip()):
            raise TranscriptRequiredError()
        return await self._video.generate(prompt, options)
