"""Hosted Whisper transcription through the Groq audio API."""

import logging

from groq import AsyncGroq

from dreamscape.core.config import get_settings
from dreamscape.core.exceptions import TranscriptionError
from dreamscape.core.models import TranscriptionResult, TranscriptionSegment
from dreamscape.core.utils import preview
from dreamscape.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


def _field(obj, name: str, default=None):
    """Read *name* from an SDK object or a plain dict."""
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class GroqSTT(BaseSTT):
    """Speech-to-text provider backed by Groq's Whisper endpoint.

    Args:
        api_key: Groq API key (defaults to settings).
        model: Transcription model name (defaults to settings).
        language: ISO 639-1 hint; empty string lets the model auto-detect.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        language: str | None = None,
    ) -> None:
        settings = get_settings()
        self._model = model or settings.groq_transcription_model
        self._language = language if language is not None else settings.transcription_language
        self._client = AsyncGroq(api_key=api_key or settings.groq_api_key)

    async def transcribe(self, audio: bytes, filename: str, **kwargs) -> TranscriptionResult:
        """Upload *audio* and return the verbose transcription."""
        if not audio:
            raise TranscriptionError(detail=f"Audio is empty: {filename}")

        request: dict = {
            "file": (filename, audio),
            "model": self._model,
            "response_format": "verbose_json",
            "timestamp_granularities": ["segment"],
            "temperature": kwargs.get("temperature", 0.0),
        }
        language = kwargs.get("language", self._language)
        if language:
            request["language"] = language

        logger.info("Transcribing %s (%d bytes)", filename, len(audio))
        try:
            response = await self._client.audio.transcriptions.create(**request)
        except Exception as exc:
            logger.error("Groq transcription failed for %s: %s", filename, exc)
            raise TranscriptionError(detail=f"Groq transcription failed: {exc}") from exc

        segments = [
            TranscriptionSegment(
                text=str(_field(seg, "text", "")).strip(),
                start=float(_field(seg, "start", 0.0) or 0.0),
                end=float(_field(seg, "end", 0.0) or 0.0),
            )
            for seg in (_field(response, "segments") or [])
            if str(_field(seg, "text", "")).strip()
        ]
        text = (_field(response, "text") or "").strip()
        logger.info("Transcription of %s: %r", filename, preview(text, 50))

        return TranscriptionResult(
            text=text,
            language=_field(response, "language") or "unknown",
            duration=float(_field(response, "duration", 0.0) or 0.0),
            segments=segments,
        )
