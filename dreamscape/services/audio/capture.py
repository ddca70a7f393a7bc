"""
Capture controller: one audio stream, two recording lines.

The *continuous* line records the whole session and produces the
authoritative audio artifact when the session stops. The *chunk* line is
self-scheduling: every interval a fresh short-lived recorder is started
against the same stream and stopped at the end of the interval, so each
chunk is an independently decodable WAV file.

Session state machine::

    idle -> recording -> stopping -> finished
      ^                                 |
      +------------- reset() -----------+

``recording -> stopping`` happens on ``stop()`` or when the session hits
its duration ceiling; ``stopping -> finished`` once the continuous
recorder has been closed. Subscribers receive typed events; they must not
block, since they run inline with the capture timeline.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from dreamscape.core.exceptions import MicrophoneUnavailableError, SessionStateError
from dreamscape.services.audio.processor import AudioProcessor
from dreamscape.services.audio.source import AudioSource

logger = logging.getLogger(__name__)


class CaptureState(StrEnum):
    idle = "idle"
    recording = "recording"
    stopping = "stopping"
    finished = "finished"


@dataclass(frozen=True)
class StateChanged:
    session_id: str
    previous: CaptureState
    current: CaptureState


@dataclass(frozen=True)
class ChunkStarted:
    session_id: str
    chunk_index: int


@dataclass(frozen=True)
class ChunkCaptured:
    session_id: str
    chunk_index: int
    audio: bytes


@dataclass(frozen=True)
class RecordingFinished:
    session_id: str
    audio: bytes
    elapsed_ms: int
    chunk_count: int


CaptureEvent = StateChanged | ChunkStarted | ChunkCaptured | RecordingFinished
CaptureListener = Callable[[CaptureEvent], None]


class Recorder:
    """Buffers PCM from a source between ``start()`` and ``stop()``."""

    def __init__(self, source: AudioSource, processor: AudioProcessor) -> None:
        self._source = source
        self._processor = processor
        self._buffer = bytearray()
        self.active = False

    def start(self) -> None:
        self._buffer.clear()
        self._source.attach(self)
        self.active = True

    def feed(self, data: bytes) -> None:
        self._buffer.extend(data)

    def stop(self) -> bytes:
        """Detach from the source and return the recording as WAV bytes."""
        self._source.detach(self)
        self.active = False
        return self._processor.pcm_to_wav(bytes(self._buffer))


class CaptureController:
    """Owns one capture session over an ``AudioSource``.

    Args:
        source: The shared audio stream.
        chunk_interval: Seconds each chunk recorder runs.
        max_duration: Seconds after which the session stops by itself.
        min_chunk_bytes: Chunks smaller than this are dropped silently.
        processor: PCM framing for the source's format.
    """

    def __init__(
        self,
        source: AudioSource,
        *,
        chunk_interval: float = 5.0,
        max_duration: float = 60.0,
        min_chunk_bytes: int = 1024,
        processor: AudioProcessor | None = None,
    ) -> None:
        self._source = source
        self._chunk_interval = chunk_interval
        self._max_duration = max_duration
        self._min_chunk_bytes = min_chunk_bytes
        self._processor = processor or AudioProcessor()
        self._listeners: list[CaptureListener] = []

        self._state = CaptureState.idle
        self._session_id: str | None = None
        self._chunk_sequence = 0
        self._started_at: float | None = None
        self._stopped_at: float | None = None
        self._continuous: Recorder | None = None
        self._stop_requested = asyncio.Event()
        self._chunk_task: asyncio.Task | None = None
        self._ceiling_task: asyncio.Task | None = None
        self._finish_task: asyncio.Task | None = None
        self._result: RecordingFinished | None = None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def session_id(self) -> str | None:
        return self._session_id

    @property
    def chunk_sequence(self) -> int:
        """Number of chunk recorders started in this session."""
        return self._chunk_sequence

    @property
    def elapsed_ms(self) -> int:
        if self._started_at is None:
            return 0
        end = self._stopped_at
        if end is None:
            end = asyncio.get_running_loop().time()
        return int((end - self._started_at) * 1000)

    @property
    def result(self) -> RecordingFinished | None:
        return self._result

    def subscribe(self, listener: CaptureListener) -> Callable[[], None]:
        """Register *listener* for capture events. Returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def start(self) -> str:
        """Acquire the stream and start both recording lines.

        Returns:
            The new session id.

        Raises:
            SessionStateError: If a session is already in progress.
            MicrophoneUnavailableError: If the stream cannot be acquired.
        """
        if self._state is not CaptureState.idle:
            raise SessionStateError(f"Cannot start capture while {self._state.value}")

        try:
            await self._source.open()
        except MicrophoneUnavailableError:
            logger.warning("Audio stream unavailable, capture not started")
            raise
        except Exception as exc:
            logger.warning("Audio stream unavailable, capture not started: %s", exc)
            raise MicrophoneUnavailableError(detail=str(exc)) from exc

        loop = asyncio.get_running_loop()
        self._session_id = uuid.uuid4().hex
        self._chunk_sequence = 0
        self._started_at = loop.time()
        self._stopped_at = None
        self._result = None
        self._stop_requested = asyncio.Event()

        self._continuous = Recorder(self._source, self._processor)
        self._continuous.start()
        self._set_state(CaptureState.recording)

        self._chunk_task = asyncio.create_task(self._chunk_loop())
        self._ceiling_task = asyncio.create_task(self._ceiling_watch())
        logger.info("Capture session %s started", self._session_id)
        return self._session_id

    async def stop(self) -> RecordingFinished | None:
        """Stop the session and wait until the full recording is available.

        Safe to call more than once; later calls return the same result.
        Returns None when no session was started.
        """
        if self._state is CaptureState.idle:
            return None
        if self._state is CaptureState.recording:
            self._request_stop()
        if self._finish_task is not None:
            await self._finish_task
        return self._result

    async def wait_finished(self) -> RecordingFinished | None:
        """Block until the session finishes (by ``stop()`` or the ceiling)."""
        if self._state is CaptureState.idle:
            return None
        await self._stop_requested.wait()
        if self._finish_task is not None:
            await self._finish_task
        return self._result

    async def reset(self) -> None:
        """Discard the session from any state and return to ``idle``."""
        for task in (self._chunk_task, self._ceiling_task, self._finish_task):
            if task is not None and not task.done():
                task.cancel()
        for task in (self._chunk_task, self._ceiling_task, self._finish_task):
            if task is not None:
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._chunk_task = self._ceiling_task = self._finish_task = None

        if self._continuous is not None and self._continuous.active:
            self._continuous.stop()
        self._continuous = None
        await self._source.close()

        if self._state is not CaptureState.idle:
            logger.info("Capture session %s reset", self._session_id)
            self._set_state(CaptureState.idle)
        self._session_id = None
        self._started_at = None
        self._stopped_at = None
        self._result = None
        self._chunk_sequence = 0

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_state(self, state: CaptureState) -> None:
        previous, self._state = self._state, state
        self._emit(StateChanged(self._session_id or "", previous, state))

    def _emit(self, event: CaptureEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Capture listener failed on %s", type(event).__name__)

    def _request_stop(self) -> None:
        if self._state is not CaptureState.recording:
            return
        self._stopped_at = asyncio.get_running_loop().time()
        self._set_state(CaptureState.stopping)
        self._stop_requested.set()
        self._finish_task = asyncio.create_task(self._finish())

    async def _chunk_loop(self) -> None:
        """Start a chunk recorder now and at every interval until stopped."""
        while not self._stop_requested.is_set():
            index = self._chunk_sequence
            self._chunk_sequence += 1
            recorder = Recorder(self._source, self._processor)
            recorder.start()
            self._emit(ChunkStarted(self._session_id or "", index))
            try:
                await asyncio.wait_for(self._stop_requested.wait(), timeout=self._chunk_interval)
            except TimeoutError:
                pass
            self._complete_chunk(index, recorder)

    def _complete_chunk(self, index: int, recorder: Recorder) -> None:
        audio = recorder.stop()
        if len(audio) < self._min_chunk_bytes:
            logger.debug("Dropping chunk %d (%d bytes)", index, len(audio))
            return
        self._emit(ChunkCaptured(self._session_id or "", index, audio))

    async def _ceiling_watch(self) -> None:
        try:
            await asyncio.wait_for(self._stop_requested.wait(), timeout=self._max_duration)
        except TimeoutError:
            logger.info(
                "Capture session %s reached %.0fs ceiling", self._session_id, self._max_duration
            )
            self._request_stop()

    async def _finish(self) -> None:
        if self._chunk_task is not None:
            await self._chunk_task

        audio = self._continuous.stop() if self._continuous is not None else b""
        await self._source.close()

        self._result = RecordingFinished(
            session_id=self._session_id or "",
            audio=audio,
            elapsed_ms=self.elapsed_ms,
            chunk_count=self._chunk_sequence,
        )
        self._set_state(CaptureState.finished)
        logger.info(
            "Capture session %s finished: %d ms, %d chunks, %d bytes",
            self._session_id,
            self._result.elapsed_ms,
            self._result.chunk_count,
            len(audio),
        )
        self._emit(self._result)
