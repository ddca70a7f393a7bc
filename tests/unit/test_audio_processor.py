"""Unit tests for AudioProcessor WAV framing and upload size validation."""

import io
import wave

import pytest

from dreamscape.core.exceptions import AudioValidationError
from dreamscape.services.audio.processor import AudioProcessor, validate_audio_size


class TestAudioProcessor:
    def test_format_properties(self):
        processor = AudioProcessor()
        assert processor.frame_size == 2
        assert processor.bytes_per_second == 32000

    def test_pcm_to_wav_header(self, sample_pcm_bytes):
        wav_bytes = AudioProcessor().pcm_to_wav(sample_pcm_bytes)
        with wave.open(io.BytesIO(wav_bytes), "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == 16000
            assert wf.getnframes() == 16000

    def test_partial_frame_dropped(self):
        processor = AudioProcessor()
        assert processor.align(b"\x01\x02\x03") == b"\x01\x02"

    def test_empty_input(self):
        assert AudioProcessor().pcm_to_wav(b"") == b""
        assert AudioProcessor().pcm_to_wav(b"\x01") == b""


class TestValidateAudioSize:
    def test_within_bounds(self):
        validate_audio_size(1024, 1024, 50 * 1024 * 1024)
        validate_audio_size(50 * 1024 * 1024, 1024, 50 * 1024 * 1024)

    def test_too_small(self):
        with pytest.raises(AudioValidationError, match="too small") as exc_info:
            validate_audio_size(1023, 1024, 50 * 1024 * 1024)
        assert exc_info.value.status_code == 400

    def test_too_large(self):
        with pytest.raises(AudioValidationError, match="too large"):
            validate_audio_size(50 * 1024 * 1024 + 1, 1024, 50 * 1024 * 1024)
