"""
Pydantic v2 request / response models used across the API layer.

Wire format follows the browser client: AI endpoints speak camelCase
(``structuredData``, ``videoUrls``), Dream Records speak snake_case.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_EMOJI = "\U0001f3b5"  # 🎵

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TranscriptionSegment(BaseModel):
    """A single transcription segment with timestamps."""

    text: str
    start: float = 0.0
    end: float = 0.0


class TranscriptionResult(BaseModel):
    """Complete transcription result for one audio file."""

    text: str = ""
    language: str = "unknown"
    duration: float = 0.0
    segments: list[TranscriptionSegment] = Field(default_factory=list)


class TranscribeResponse(BaseModel):
    """POST /transcribe response: transcript plus the emoji it evokes."""

    success: bool = True
    result: TranscriptionResult
    emoji: str = DEFAULT_EMOJI


# ---------------------------------------------------------------------------
# Structuring & emoji
# ---------------------------------------------------------------------------


class TranscriptRequest(BaseModel):
    """Body shared by /structure and /emoji."""

    transcript: str | None = None


class StructureResponse(BaseModel):
    """POST /structure response. ``structuredData`` is null when unusable."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    structured_data: dict[str, Any] | None = Field(default=None, alias="structuredData")


class EmojiResponse(BaseModel):
    """POST /emoji response."""

    success: bool = True
    emoji: str = DEFAULT_EMOJI


# ---------------------------------------------------------------------------
# Video generation
# ---------------------------------------------------------------------------


class AspectRatio(StrEnum):
    landscape = "16:9"
    portrait = "9:16"


class PersonGeneration(StrEnum):
    dont_allow = "dont_allow"
    allow_adult = "allow_adult"
    allow_all = "allow_all"


class VideoOptions(BaseModel):
    """Generation config sent alongside a video prompt."""

    model_config = ConfigDict(populate_by_name=True)

    aspect_ratio: AspectRatio = Field(default=AspectRatio.landscape, alias="aspectRatio")
    person_generation: PersonGeneration = Field(
        default=PersonGeneration.dont_allow, alias="personGeneration"
    )
    number_of_videos: int = Field(default=1, ge=1, le=2, alias="numberOfVideos")
    negative_prompt: str | None = Field(default=None, alias="negativePrompt")


class GenerateVideoRequest(BaseModel):
    """POST /generate-video request body."""

    transcript: str | dict[str, Any] | None = None
    options: VideoOptions = Field(default_factory=VideoOptions)


class GenerateVideoResponse(BaseModel):
    """POST /generate-video response."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    video_urls: list[str] = Field(default_factory=list, alias="videoUrls")


# ---------------------------------------------------------------------------
# Dream Records
# ---------------------------------------------------------------------------


class DreamDraft(BaseModel):
    """Everything a Dream Record carries except its archive-assigned identity."""

    user_title: str | None = None
    ai_title: str
    ai_description: str
    transcript_raw: str
    transcript_json: dict[str, Any] = Field(default_factory=dict)
    video_url: str
    video_thumbnail: str | None = None
    emojis: list[str] = Field(default_factory=list)


class DreamRecord(DreamDraft):
    """A persisted dream. ``id`` and ``created_at`` come from the Archive Store."""

    id: str
    created_at: datetime


class DreamUpdate(BaseModel):
    """PATCH /dreams/{id} request body. Only the user title is editable."""

    user_title: str | None = None


class DeleteDreamResponse(BaseModel):
    """DELETE /dreams/{id} response."""

    id: str
    deleted: bool = True


# ---------------------------------------------------------------------------
# Dreamer profile
# ---------------------------------------------------------------------------


class VisualStyle(StrEnum):
    none = ""
    surreal = "surreal"
    realistic = "realistic"
    cartoonish = "cartoonish"
    abstract = "abstract"


class DreamerProfile(BaseModel):
    """Personal context folded into every video prompt."""

    self_description: str = ""
    triggers_and_boundaries: str = ""
    visual_style: VisualStyle = VisualStyle.none


# ---------------------------------------------------------------------------
# Capture session
# ---------------------------------------------------------------------------


class TranscriptFragment(BaseModel):
    """Transcript of one chunk, kept for live display only."""

    chunk_index: int
    text: str = ""
    emoji: str | None = None


class WebSocketMessageType(StrEnum):
    """Discriminator for messages sent over the recording WebSocket."""

    connected = "connected"
    state = "state"
    emoji = "emoji"
    stage = "stage"
    dream = "dream"
    error = "error"


class WebSocketMessage(BaseModel):
    """JSON message sent from server to client over WebSocket."""

    type: WebSocketMessageType
    data: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    success: bool = False
    error: str
    code: str
    timestamp: str
