"""Unit tests for the PipelineOrchestrator stage sequence."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from dreamscape.core.exceptions import TranscriptionError, VideoGenerationTimeoutError
from dreamscape.core.models import DreamerProfile, TranscriptionResult
from dreamscape.services.gateway import DreamServices
from dreamscape.services.orchestrator import PipelineOrchestrator, PipelineStage

PLACEHOLDER = "/static/dreambackground1.png"

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def services(mock_stt, mock_llm, mock_video):
    return DreamServices(stt=mock_stt, llm=mock_llm, video=mock_video)


@pytest.fixture
def thumbnails():
    extractor = AsyncMock()
    extractor.extract.return_value = PLACEHOLDER
    return extractor


@pytest.fixture
def stages():
    return []


@pytest.fixture
def pipeline(services, archive, thumbnails, stages):
    return PipelineOrchestrator(
        services, archive, thumbnails, notify=lambda stage, data: stages.append((stage, data))
    )


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestSuccessfulRun:
    async def test_record_created(self, pipeline, archive, sample_wav_bytes, stages):
        record = await pipeline.run(sample_wav_bytes, ["\U0001f985"])

        assert record is not None
        assert archive.list()[0].id == record.id
        assert record.ai_title == "Flight"
        assert record.ai_description == "Soaring over mountains"
        assert record.transcript_raw == "I was flying over snowy mountains."
        assert record.video_url == "https://videos.example/dream.mp4?alt=media&key=test"
        assert record.video_thumbnail == PLACEHOLDER
        assert record.emojis == ["\U0001f985"]
        assert [s for s, _ in stages] == [
            PipelineStage.transcribing,
            PipelineStage.structuring,
            PipelineStage.generating_video,
            PipelineStage.capturing_thumbnail,
            PipelineStage.saving,
            PipelineStage.completed,
        ]

    async def test_structure_without_details_still_archived(
        self, pipeline, mock_llm, sample_wav_bytes
    ):
        mock_llm.generate.return_value = '{"title":"Flight","description":"Soaring over mountains"}'
        record = await pipeline.run(sample_wav_bytes)
        assert record is not None
        assert record.transcript_json == {"title": "Flight", "description": "Soaring over mountains"}

    async def test_missing_title_and_description_fall_back(
        self, pipeline, mock_llm, mock_stt, sample_wav_bytes
    ):
        mock_llm.generate.return_value = '{"events": ["fly"]}'
        mock_stt.transcribe.return_value = TranscriptionResult(text="x" * 300)
        record = await pipeline.run(sample_wav_bytes)
        assert record.ai_title == "Untitled Dream"
        assert record.ai_description == "x" * 200 + "..."

    async def test_emoji_source_read_at_save_time(self, pipeline, sample_wav_bytes):
        emojis = ["\U0001f30a"]
        record_task = asyncio.create_task(pipeline.run(sample_wav_bytes, lambda: list(emojis)))
        emojis.append("\U0001f985")
        record = await record_task
        assert record.emojis == ["\U0001f30a", "\U0001f985"]

    async def test_profile_shapes_prompt_and_negative_prompt(
        self, services, archive, thumbnails, mock_video, sample_wav_bytes
    ):
        profile = DreamerProfile(triggers_and_boundaries="spiders", self_description="A pilot")
        pipeline = PipelineOrchestrator(services, archive, thumbnails, profile=profile)

        await pipeline.run(sample_wav_bytes)

        prompt, options = mock_video.generate.call_args.args
        assert "A pilot" in prompt
        assert options.negative_prompt == "spiders"
        assert options.aspect_ratio.value == "16:9"
        assert options.person_generation.value == "dont_allow"
        assert options.number_of_videos == 1


# ---------------------------------------------------------------------------
# Aborts
# ---------------------------------------------------------------------------


class TestAbortedRun:
    async def test_empty_transcript_aborts(self, pipeline, archive, mock_stt, mock_llm, sample_wav_bytes, stages):
        mock_stt.transcribe.return_value = TranscriptionResult(text="   ")
        assert await pipeline.run(sample_wav_bytes) is None
        mock_llm.generate.assert_not_called()
        assert archive.list() == []
        assert stages[-1][0] is PipelineStage.failed

    async def test_unusable_structure_skips_video(
        self, pipeline, archive, mock_llm, mock_video, sample_wav_bytes
    ):
        mock_llm.generate.return_value = "Sorry, I cannot help with that."
        assert await pipeline.run(sample_wav_bytes) is None
        mock_video.generate.assert_not_called()
        assert archive.list() == []

    async def test_transcription_error_aborts(self, pipeline, archive, mock_stt, sample_wav_bytes, stages):
        mock_stt.transcribe.side_effect = TranscriptionError("Groq transcription failed")
        assert await pipeline.run(sample_wav_bytes) is None
        assert archive.list() == []
        stage, data = stages[-1]
        assert stage is PipelineStage.failed
        assert data["error"] == "Could not transcribe the recording"

    async def test_video_timeout_aborts(self, pipeline, archive, mock_video, thumbnails, sample_wav_bytes):
        mock_video.generate.side_effect = VideoGenerationTimeoutError()
        assert await pipeline.run(sample_wav_bytes) is None
        thumbnails.extract.assert_not_called()
        assert archive.list() == []

    async def test_no_video_urls_aborts(self, pipeline, archive, mock_video, sample_wav_bytes):
        mock_video.generate.return_value = []
        assert await pipeline.run(sample_wav_bytes) is None
        assert archive.list() == []

    async def test_no_retries(self, pipeline, mock_video, sample_wav_bytes):
        mock_video.generate.side_effect = VideoGenerationTimeoutError()
        await pipeline.run(sample_wav_bytes)
        assert mock_video.generate.await_count == 1


# ---------------------------------------------------------------------------
# Reset
# ---------------------------------------------------------------------------


class TestReset:
    async def test_reset_discards_in_flight_run(self, pipeline, archive, mock_video, sample_wav_bytes):
        gate = asyncio.Event()

        async def slow_video(prompt, options=None):
            await gate.wait()
            return ["https://videos.example/late.mp4?key=test"]

        mock_video.generate.side_effect = slow_video
        task = asyncio.create_task(pipeline.run(sample_wav_bytes))
        await asyncio.sleep(0.05)

        pipeline.reset()
        gate.set()

        assert await task is None
        assert archive.list() == []

    async def test_runs_after_reset_proceed(self, pipeline, sample_wav_bytes):
        pipeline.reset()
        assert await pipeline.run(sample_wav_bytes) is not None
