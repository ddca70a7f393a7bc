"""
Pipeline Orchestrator: turns a finished recording into a Dream Record.

Stages run strictly in order:

    transcribe -> structure -> generate video -> thumbnail -> archive

Any stage that fails or produces nothing aborts the run; no partial record
is ever persisted and nothing is retried. ``reset()`` bumps a generation
counter so that runs already in flight finish their network calls but
discard the results.
"""

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from dreamscape.core.exceptions import DreamscapeError
from dreamscape.core.models import (
    AspectRatio,
    DreamDraft,
    DreamerProfile,
    DreamRecord,
    PersonGeneration,
    VideoOptions,
)
from dreamscape.core.utils import preview
from dreamscape.services.gateway import DreamServices
from dreamscape.services.storage.archive import ArchiveStore
from dreamscape.services.video.prompt import compose_video_prompt
from dreamscape.services.video.thumbnail import ThumbnailExtractor

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Dream"
DESCRIPTION_EXCERPT = 200


class PipelineStage(StrEnum):
    transcribing = "transcribing"
    structuring = "structuring"
    generating_video = "generating_video"
    capturing_thumbnail = "capturing_thumbnail"
    saving = "saving"
    completed = "completed"
    failed = "failed"


StageListener = Callable[[PipelineStage, dict[str, Any]], None]
EmojiSource = Callable[[], list[str]]

FAILURE_MESSAGES = {
    PipelineStage.transcribing: "Could not transcribe the recording",
    PipelineStage.structuring: "Could not make sense of the dream",
    PipelineStage.generating_video: "Video generation failed",
    PipelineStage.saving: "Could not save the dream",
}
GENERIC_FAILURE = "Something went wrong"


def _text_field(structured: dict[str, Any], key: str) -> str:
    value = structured.get(key)
    return value.strip() if isinstance(value, str) else ""


class StaleRunError(Exception):
    """A reset happened while the run was in flight."""


class PipelineOrchestrator:
    """Sequential dream pipeline for one recording session.

    Args:
        services: AI operations (transcription, structuring, video).
        archive: Where finished dreams are persisted.
        thumbnails: First-frame extractor for generated videos.
        profile: Dreamer profile folded into the video prompt.
        notify: Called on every stage transition with ``(stage, data)``.
    """

    def __init__(
        self,
        services: DreamServices,
        archive: ArchiveStore,
        thumbnails: ThumbnailExtractor,
        profile: DreamerProfile | None = None,
        notify: StageListener | None = None,
    ) -> None:
        self._services = services
        self._archive = archive
        self._thumbnails = thumbnails
        self._profile = profile or DreamerProfile()
        self._notify = notify
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def reset(self) -> None:
        """Mark every in-flight run stale."""
        self._generation += 1
        logger.info("Pipeline reset (generation %d)", self._generation)

    def video_options(self) -> VideoOptions:
        triggers = self._profile.triggers_and_boundaries.strip()
        return VideoOptions(
            aspect_ratio=AspectRatio.landscape,
            person_generation=PersonGeneration.dont_allow,
            number_of_videos=1,
            negative_prompt=triggers or None,
        )

    def _emit(self, stage: PipelineStage, **data: Any) -> None:
        if self._notify is None:
            return
        try:
            self._notify(stage, data)
        except Exception:
            logger.exception("Stage listener failed on %s", stage.value)

    def _check(self, generation: int) -> None:
        if generation != self._generation:
            raise StaleRunError()

    async def run(
        self, audio: bytes, emojis: EmojiSource | list[str] | None = None
    ) -> DreamRecord | None:
        """Run every stage for *audio*.

        Args:
            audio: The full-session WAV recording.
            emojis: Emoji sequence for the record, or a callable returning
                it; a callable is read at save time so late chunk results
                are included.

        Returns:
            The archived record, or None if the run aborted or went stale.
        """
        generation = self._generation
        stage = PipelineStage.transcribing
        try:
            self._emit(stage)
            result = await self._services.transcribe(audio, "recording.wav", "audio/wav")
            self._check(generation)
            transcript = result.text.strip()
            if not transcript:
                logger.warning("Pipeline aborted: empty transcript")
                self._emit(PipelineStage.failed, error="No speech detected")
                return None

            stage = PipelineStage.structuring
            self._emit(stage, transcript=transcript)
            structured = await self._services.structure(transcript)
            self._check(generation)
            if not structured:
                logger.warning("Pipeline aborted: structuring returned nothing")
                self._emit(PipelineStage.failed, error=FAILURE_MESSAGES[stage])
                return None

            stage = PipelineStage.generating_video
            self._emit(stage)
            prompt = compose_video_prompt(structured, self._profile)
            urls = await self._services.generate_video(prompt, self.video_options())
            self._check(generation)
            if not urls:
                logger.warning("Pipeline aborted: provider returned no video")
                self._emit(PipelineStage.failed, error=FAILURE_MESSAGES[stage])
                return None

            stage = PipelineStage.capturing_thumbnail
            self._emit(stage)
            thumbnail = await self._thumbnails.extract(urls[0])
            self._check(generation)

            stage = PipelineStage.saving
            self._emit(stage)
            if callable(emojis):
                emojis = emojis()
            draft = DreamDraft(
                ai_title=_text_field(structured, "title") or DEFAULT_TITLE,
                ai_description=(
                    _text_field(structured, "description")
                    or preview(transcript, DESCRIPTION_EXCERPT)
                ),
                transcript_raw=transcript,
                transcript_json=structured,
                video_url=urls[0],
                video_thumbnail=thumbnail,
                emojis=list(emojis or []),
            )
            record = await self._archive.create(draft)
        except StaleRunError:
            logger.info("Discarding stale pipeline run at %s", stage.value)
            return None
        except DreamscapeError as exc:
            logger.error("Pipeline failed at %s: %s", stage.value, exc.detail)
            self._emit(PipelineStage.failed, error=FAILURE_MESSAGES.get(stage, GENERIC_FAILURE))
            return None
        except Exception:
            logger.exception("Pipeline crashed at %s", stage.value)
            self._emit(PipelineStage.failed, error=FAILURE_MESSAGES.get(stage, GENERIC_FAILURE))
            return None

        self._emit(PipelineStage.completed, dream_id=record.id)
        return record

