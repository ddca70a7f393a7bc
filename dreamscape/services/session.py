"""
Recording session: one capture, its chunk uploads and its pipeline run.

Wires a :class:`CaptureController` to a :class:`ChunkUploader` (emoji side
channel) and a :class:`PipelineOrchestrator` (main channel), and turns
everything they report into :class:`WebSocketMessage` objects on an
outbox queue that the WebSocket handler drains in order.
"""

import asyncio
import logging
from typing import Any

from dreamscape.core.config import Settings
from dreamscape.core.models import (
    DreamerProfile,
    TranscriptFragment,
    WebSocketMessage,
    WebSocketMessageType,
)
from dreamscape.services.audio.capture import (
    CaptureController,
    CaptureEvent,
    CaptureState,
    ChunkStarted,
    RecordingFinished,
    StateChanged,
)
from dreamscape.services.audio.source import PushAudioSource
from dreamscape.services.gateway import DreamServices
from dreamscape.services.orchestrator import PipelineOrchestrator, PipelineStage
from dreamscape.services.storage.archive import ArchiveStore
from dreamscape.services.uploader import ChunkResults, ChunkUploader
from dreamscape.services.video.thumbnail import ThumbnailExtractor

logger = logging.getLogger(__name__)


class RecordingSession:
    """Server-side state for one ``/ws/record`` connection."""

    def __init__(
        self,
        services: DreamServices,
        archive: ArchiveStore,
        thumbnails: ThumbnailExtractor,
        settings: Settings,
        profile: DreamerProfile | None = None,
    ) -> None:
        self.outbox: asyncio.Queue[WebSocketMessage] = asyncio.Queue()
        self.source = PushAudioSource(
            sample_rate=settings.sample_rate, expected_rate=settings.sample_rate
        )
        self.controller = CaptureController(
            self.source,
            chunk_interval=settings.chunk_interval_ms / 1000,
            max_duration=settings.max_recording_ms / 1000,
            min_chunk_bytes=settings.min_chunk_bytes,
        )
        self.uploader = ChunkUploader(
            services.transcribe_with_emoji,
            max_concurrent=settings.upload_concurrency,
            on_fragment=self._on_fragment,
        )
        self.pipeline = PipelineOrchestrator(
            services, archive, thumbnails, profile=profile, notify=self._on_stage
        )
        self._pipeline_tasks: set[asyncio.Task] = set()
        self.controller.subscribe(self._on_capture_event)
        self.controller.subscribe(self.uploader.handle_event)

    def send(self, type_: WebSocketMessageType, **data: Any) -> None:
        self.outbox.put_nowait(WebSocketMessage(type=type_, data=data))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def start(self, sample_rate: int | None = None) -> str:
        """Begin a new capture; a finished previous capture is cleared first."""
        if self.controller.state is CaptureState.finished:
            await self.controller.reset()
        if sample_rate is not None:
            self.source.sample_rate = sample_rate
        self.uploader.clear()
        self.uploader.start()
        return await self.controller.start()

    def feed(self, data: bytes) -> None:
        self.source.write(data)

    async def stop(self) -> None:
        await self.controller.stop()

    async def reset(self) -> None:
        """Discard the capture and mark any pipeline run stale."""
        self.pipeline.reset()
        self.uploader.clear()
        await self.controller.reset()

    async def close(self, wait: bool = True) -> None:
        """Tear the session down.

        A capture in progress is discarded. With *wait*, pipeline runs that
        already started are allowed to finish and archive their dream;
        otherwise they are cancelled.
        """
        await self.controller.reset()
        await self.uploader.close()
        if not wait:
            self.pipeline.reset()
            for task in self._pipeline_tasks:
                task.cancel()
        await self.wait_idle()

    async def wait_idle(self) -> None:
        """Wait for every started pipeline run to finish."""
        if self._pipeline_tasks:
            await asyncio.gather(*list(self._pipeline_tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Event fan-in
    # ------------------------------------------------------------------

    def _on_capture_event(self, event: CaptureEvent) -> None:
        if isinstance(event, StateChanged):
            self.send(
                WebSocketMessageType.state,
                state=event.current.value,
                previous=event.previous.value,
                session_id=event.session_id,
            )
        elif isinstance(event, ChunkStarted):
            logger.debug("Chunk %d started", event.chunk_index)
        elif isinstance(event, RecordingFinished):
            # results of the capture that just finished
            task = asyncio.create_task(self._run_pipeline(event, self.uploader.results))
            self._pipeline_tasks.add(task)
            task.add_done_callback(self._pipeline_tasks.discard)

    def _on_fragment(self, fragment: TranscriptFragment) -> None:
        self.send(
            WebSocketMessageType.emoji,
            chunk_index=fragment.chunk_index,
            emoji=fragment.emoji,
            text=fragment.text,
        )

    def _on_stage(self, stage: PipelineStage, data: dict[str, Any]) -> None:
        if stage is PipelineStage.failed:
            self.send(WebSocketMessageType.error, message=data.get("error", ""))
        else:
            self.send(WebSocketMessageType.stage, stage=stage.value, **data)

    async def _run_pipeline(self, finished: RecordingFinished, results: ChunkResults) -> None:
        if not finished.audio:
            self.send(WebSocketMessageType.error, message="No audio was captured")
            return
        record = await self.pipeline.run(finished.audio, lambda: list(results.emojis))
        if record is not None:
            self.send(WebSocketMessageType.dream, **record.model_dump(mode="json"))
