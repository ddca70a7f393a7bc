"""Audio processing utilities for PCM data.

Frames raw PCM bytes as WAV and checks uploads against size limits.
"""

import io
import wave

from dreamscape.core.exceptions import AudioValidationError


class AudioProcessor:
    """Handles PCM framing for one fixed stream format.

    Args:
        sample_rate: Audio sample rate in Hz (default: 16 kHz).
        sample_width: Bytes per sample (2 = 16-bit signed PCM).
        channels: Number of audio channels (1 = mono).
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        sample_width: int = 2,
        channels: int = 1,
    ) -> None:
        self.sample_rate = sample_rate
        self.sample_width = sample_width
        self.channels = channels

    @property
    def frame_size(self) -> int:
        """Bytes per sample frame across all channels."""
        return self.sample_width * self.channels

    @property
    def bytes_per_second(self) -> int:
        return self.sample_rate * self.frame_size

    def align(self, pcm_data: bytes) -> bytes:
        """Drop a trailing partial frame, if any."""
        usable = len(pcm_data) - (len(pcm_data) % self.frame_size)
        return pcm_data[:usable]

    def pcm_to_wav(self, pcm_data: bytes) -> bytes:
        """Wrap raw PCM bytes in a WAV container.

        Returns an empty bytes object for empty input so callers can apply
        their own minimum-size policy.
        """
        pcm_data = self.align(pcm_data)
        if not pcm_data:
            return b""
        buf = io.BytesIO()
        with wave.open(buf, "wb") as wf:
            wf.setnchannels(self.channels)
            wf.setsampwidth(self.sample_width)
            wf.setframerate(self.sample_rate)
            wf.writeframes(pcm_data)
        return buf.getvalue()


def validate_audio_size(size: int, min_bytes: int, max_bytes: int) -> None:
    """Reject uploads outside ``[min_bytes, max_bytes]``.

    Raises:
        AudioValidationError: If the file is too small or too large.
    """
    if size < min_bytes:
        raise AudioValidationError(detail="Audio file too small")
    if size > max_bytes:
        raise AudioValidationError(detail="Audio file too large")
