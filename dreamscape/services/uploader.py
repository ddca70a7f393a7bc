"""
Chunk Uploader: background transcription of short capture chunks.

Chunks are queued as they are captured and drained by a small pool of
worker tasks, so a slow transcription never blocks capture. Results are
kept in arrival order, which may differ from chunk order. Failures are
logged and dropped; a chunk that fails simply contributes no fragment.

Each capture session collects into its own :class:`ChunkResults`. A chunk
is tagged with the results object that was current when it was queued, so
an upload that finishes after ``clear()`` lands in its own session's
results and never in the next one's.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from dreamscape.core.models import TranscribeResponse, TranscriptFragment
from dreamscape.services.audio.capture import CaptureEvent, ChunkCaptured

logger = logging.getLogger(__name__)

ChunkTranscriber = Callable[[bytes, str], Awaitable[TranscribeResponse]]
FragmentListener = Callable[[TranscriptFragment], None]


@dataclass
class ChunkResults:
    """Fragments and emojis of one capture session, in arrival order."""

    fragments: list[TranscriptFragment] = field(default_factory=list)
    emojis: list[str] = field(default_factory=list)


class ChunkUploader:
    """Bounded pool of workers that transcribe chunks off the capture path.

    Args:
        transcribe: Coroutine taking ``(audio, filename)`` and returning a
            :class:`TranscribeResponse`.
        max_concurrent: Number of chunks transcribed at the same time.
        on_fragment: Called with each successful fragment, in arrival order.
    """

    def __init__(
        self,
        transcribe: ChunkTranscriber,
        max_concurrent: int = 3,
        on_fragment: FragmentListener | None = None,
    ) -> None:
        self._transcribe = transcribe
        self._max_concurrent = max(1, max_concurrent)
        self._on_fragment = on_fragment
        self._queue: asyncio.Queue[tuple[ChunkResults, int, bytes]] = asyncio.Queue()
        self._workers: list[asyncio.Task] = []
        self._results = ChunkResults()

    @property
    def results(self) -> ChunkResults:
        """The current session's results; replaced by ``clear()``."""
        return self._results

    @property
    def emojis(self) -> list[str]:
        return list(self._results.emojis)

    @property
    def fragments(self) -> list[TranscriptFragment]:
        return list(self._results.fragments)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._worker(n)) for n in range(self._max_concurrent)
        ]

    def submit(self, chunk_index: int, audio: bytes) -> None:
        """Queue a chunk for transcription; never blocks."""
        if not self._workers:
            self.start()
        self._queue.put_nowait((self._results, chunk_index, audio))
        logger.debug("Chunk %d queued (%d bytes)", chunk_index, len(audio))

    def handle_event(self, event: CaptureEvent) -> None:
        """Capture listener: submit every captured chunk."""
        if isinstance(event, ChunkCaptured):
            self.submit(event.chunk_index, event.audio)

    async def drain(self) -> None:
        """Wait until every queued chunk has been processed."""
        await self._queue.join()

    def clear(self) -> None:
        """Drop queued chunks and start a fresh results bucket.

        Uploads already in flight finish into the bucket they were queued
        with.
        """
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
        self._results = ChunkResults()

    async def close(self) -> None:
        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

    async def _worker(self, worker_id: int) -> None:
        while True:
            results, chunk_index, audio = await self._queue.get()
            try:
                await self._upload(results, chunk_index, audio)
            finally:
                self._queue.task_done()

    async def _upload(self, results: ChunkResults, chunk_index: int, audio: bytes) -> None:
        try:
            response = await self._transcribe(audio, f"chunk-{chunk_index}.wav")
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Chunk %d transcription failed: %s", chunk_index, exc)
            return

        if not response.success:
            logger.warning("Chunk %d transcription unsuccessful", chunk_index)
            return

        fragment = TranscriptFragment(
            chunk_index=chunk_index,
            text=response.result.text,
            emoji=response.emoji or None,
        )
        results.fragments.append(fragment)
        if fragment.emoji:
            results.emojis.append(fragment.emoji)
        if results is not self._results:
            logger.debug("Chunk %d finished after its session was cleared", chunk_index)
            return
        logger.debug("Chunk %d transcribed, emoji=%s", chunk_index, fragment.emoji)

        if self._on_fragment is not None:
            try:
                self._on_fragment(fragment)
            except Exception:
                logger.exception("Fragment listener failed for chunk %d", chunk_index)
