"""
Abstract base class for Speech-to-Text providers.

All STT implementations must implement this interface, enabling
provider-agnostic transcription in the service layer.
"""

from abc import ABC, abstractmethod

from dreamscape.core.models import TranscriptionResult


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, audio: bytes, filename: str, **kwargs) -> TranscriptionResult:
        """Transcribe one complete audio file.

        Args:
            audio: Encoded audio bytes (wav, webm, mp3, ogg or m4a).
            filename: Name whose extension tells the provider the container.
            **kwargs: Provider-specific options (language, temperature, etc.).

        Returns:
            The transcription result; ``text`` may be empty for silence.

        Raises:
            TranscriptionError: If the provider call fails.
        """
