"""
Dreamscape exception hierarchy.

All application-specific exceptions inherit from DreamscapeError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime


class DreamscapeError(Exception):
    """Base exception for all Dreamscape errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "DREAMSCAPE_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class AudioValidationError(DreamscapeError):
    """Raised when an uploaded audio file is missing, too small, or too large."""

    def __init__(self, detail: str = "Invalid audio file") -> None:
        super().__init__(detail=detail, code="INVALID_AUDIO", status_code=400)


class TranscriptRequiredError(DreamscapeError):
    """Raised when a transcript-consuming endpoint receives no transcript."""

    def __init__(self) -> None:
        super().__init__(
            detail="Transcript is required",
            code="TRANSCRIPT_REQUIRED",
            status_code=400,
        )


class DreamNotFoundError(DreamscapeError):
    """Raised when a dream ID does not exist in the archive."""

    def __init__(self, dream_id: str) -> None:
        super().__init__(
            detail=f"Dream not found: {dream_id}",
            code="DREAM_NOT_FOUND",
            status_code=404,
        )


class SessionStateError(DreamscapeError):
    """Raised when a capture session transition is not allowed in its current state."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail=detail, code="INVALID_SESSION_STATE", status_code=409)


class MicrophoneUnavailableError(DreamscapeError):
    """Raised when the audio stream for a capture session cannot be acquired."""

    def __init__(self, detail: str = "Microphone is not available") -> None:
        super().__init__(detail=detail, code="MICROPHONE_UNAVAILABLE", status_code=400)


class TranscriptionError(DreamscapeError):
    """Raised when STT processing fails."""

    def __init__(self, detail: str = "Transcription failed") -> None:
        super().__init__(detail=detail, code="TRANSCRIPTION_ERROR", status_code=502)


class StructuringError(DreamscapeError):
    """Raised when the LLM call behind transcript structuring fails."""

    def __init__(self, detail: str = "Failed to structure transcript") -> None:
        super().__init__(detail=detail, code="STRUCTURING_ERROR", status_code=502)


class VideoGenerationError(DreamscapeError):
    """Raised when the video provider reports a failed generation."""

    def __init__(self, detail: str = "Failed to generate video") -> None:
        super().__init__(detail=detail, code="VIDEO_GENERATION_ERROR", status_code=502)


class VideoGenerationTimeoutError(DreamscapeError):
    """Raised when a video generation job outlives its poll budget."""

    def __init__(self, detail: str = "Video generation timed out") -> None:
        super().__init__(detail=detail, code="VIDEO_GENERATION_TIMEOUT", status_code=504)
