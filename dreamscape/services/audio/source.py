"""
Audio sources for capture sessions.

An ``AudioSource`` is the session's microphone stream: it is opened once,
then fans every PCM block out to whichever recorders are attached. The
stream is shared read-only; recorders never modify what they receive.
"""

import logging
from abc import ABC, abstractmethod
from typing import Protocol

from dreamscape.core.exceptions import MicrophoneUnavailableError

logger = logging.getLogger(__name__)


class AudioSink(Protocol):
    """Anything that accepts PCM blocks from a source."""

    def feed(self, data: bytes) -> None: ...


class AudioSource(ABC):
    """Base class for a shared PCM stream with attachable sinks."""

    def __init__(self) -> None:
        self._sinks: list[AudioSink] = []
        self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    @abstractmethod
    async def open(self) -> None:
        """Acquire the underlying stream.

        Raises:
            MicrophoneUnavailableError: If the stream cannot be acquired.
        """

    async def close(self) -> None:
        """Release the stream and detach every sink."""
        self._opened = False
        self._sinks.clear()

    def attach(self, sink: AudioSink) -> None:
        if sink not in self._sinks:
            self._sinks.append(sink)

    def detach(self, sink: AudioSink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)

    def _dispatch(self, data: bytes) -> None:
        for sink in list(self._sinks):
            sink.feed(data)


class PushAudioSource(AudioSource):
    """A source fed by the caller, e.g. PCM frames arriving over a WebSocket.

    Args:
        sample_rate: Declared rate of the incoming stream.
        expected_rate: Rate the capture pipeline is configured for.
    """

    def __init__(self, sample_rate: int = 16000, expected_rate: int = 16000) -> None:
        super().__init__()
        self.sample_rate = sample_rate
        self._expected_rate = expected_rate
        self.bytes_received = 0

    async def open(self) -> None:
        if self.sample_rate != self._expected_rate:
            raise MicrophoneUnavailableError(
                detail=(
                    f"Unsupported sample rate {self.sample_rate} Hz "
                    f"(expected {self._expected_rate} Hz)"
                )
            )
        self._opened = True
        logger.debug("Push audio source opened at %d Hz", self.sample_rate)

    def write(self, data: bytes) -> None:
        """Push one PCM block to every attached sink. Ignored while closed."""
        if not self._opened or not data:
            return
        self.bytes_received += len(data)
        self._dispatch(data)
