"""
AI endpoints: transcription, emoji detection, structuring, video generation.

Thin wrappers over :class:`DreamServices`; validation failures and
provider errors surface through the global error handlers.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from dreamscape.api.dependencies import get_services
from dreamscape.core.exceptions import AudioValidationError, TranscriptRequiredError
from dreamscape.core.models import (
    EmojiResponse,
    GenerateVideoRequest,
    GenerateVideoResponse,
    StructureResponse,
    TranscribeResponse,
    TranscriptRequest,
)
from dreamscape.core.utils import preview
from dreamscape.services.gateway import DreamServices

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ai"])


@router.post("/transcribe", response_model=TranscribeResponse)
async def transcribe(
    audio: UploadFile | None = File(None),
    services: DreamServices = Depends(get_services),
):
    """Transcribe an uploaded audio file and pick an emoji for it."""
    if audio is None:
        raise AudioValidationError("No audio file provided")
    content = await audio.read()
    logger.info("Transcribe request: %s (%d bytes)", audio.filename, len(content))
    return await services.transcribe_with_emoji(content, audio.filename, audio.content_type)


@router.post("/structure", response_model=StructureResponse)
async def structure(
    body: TranscriptRequest,
    services: DreamServices = Depends(get_services),
):
    """Structure a dream transcript; ``structuredData`` is null when unusable."""
    if not body.transcript:
        raise TranscriptRequiredError()
    logger.info("Structure request: %r", preview(body.transcript))
    structured = await services.structure(body.transcript)
    return StructureResponse(structured_data=structured)


@router.post("/emoji", response_model=EmojiResponse)
async def emoji(
    body: TranscriptRequest,
    services: DreamServices = Depends(get_services),
):
    """Return the single emoji that best represents a transcript."""
    if not body.transcript:
        raise TranscriptRequiredError()
    return EmojiResponse(emoji=await services.detect_emoji(body.transcript))


@router.post("/generate-video", response_model=GenerateVideoResponse)
async def generate_video(
    body: GenerateVideoRequest,
    services: DreamServices = Depends(get_services),
):
    """Generate video(s) from a transcript or structured dream document."""
    if not body.transcript:
        raise TranscriptRequiredError()
    urls = await services.generate_video(body.transcript, body.options)
    return GenerateVideoResponse(video_urls=urls)
