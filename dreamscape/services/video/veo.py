"""
Google Veo video generation through the ``google-genai`` SDK.

``generate_videos`` returns a long-running operation that is polled at a
fixed interval until it reports ``done``. Polling is bounded both by a
maximum attempt count and by an overall deadline; running out of either
raises ``VideoGenerationTimeoutError``, which callers can tell apart from
a provider-reported ``VideoGenerationError``.
"""

import json
import logging
from typing import Any

from google import genai
from google.genai import types as genai_types
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    wait_fixed,
)

from dreamscape.core.config import get_settings
from dreamscape.core.exceptions import VideoGenerationError, VideoGenerationTimeoutError
from dreamscape.core.models import VideoOptions
from dreamscape.core.utils import preview
from dreamscape.services.video.base import BaseVideoGenerator

logger = logging.getLogger(__name__)


def _still_running(operation) -> bool:
    return not operation.done


class VeoVideoGenerator(BaseVideoGenerator):
    """Veo provider with bounded operation polling.

    Args:
        api_key: Google API key; also appended to download URLs.
        model: Veo model name.
        poll_interval: Seconds between operation polls.
        max_poll_attempts: Maximum number of polls after submission.
        deadline_seconds: Overall wall-clock budget for polling.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        poll_interval: float | None = None,
        max_poll_attempts: int | None = None,
        deadline_seconds: float | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.google_api_key
        self._model = model or settings.veo_model
        self._poll_interval = (
            poll_interval if poll_interval is not None else settings.video_poll_interval
        )
        self._max_poll_attempts = max_poll_attempts or settings.video_max_poll_attempts
        self._deadline = deadline_seconds or settings.video_deadline_seconds
        self._client = genai.Client(api_key=self._api_key)

    def _build_config(self, options: VideoOptions) -> genai_types.GenerateVideosConfig:
        config: dict[str, Any] = {
            "aspect_ratio": options.aspect_ratio.value,
            "person_generation": options.person_generation.value,
            "number_of_videos": options.number_of_videos,
        }
        if options.negative_prompt:
            config["negative_prompt"] = options.negative_prompt
        return genai_types.GenerateVideosConfig(**config)

    async def _poll(self, operation):
        return await self._client.aio.operations.get(operation)

    async def _wait_for(self, operation):
        """Poll *operation* until done, within the attempt and time budget."""
        if operation.done:
            return operation

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_poll_attempts) | stop_after_delay(self._deadline),
            wait=wait_fixed(self._poll_interval),
            retry=retry_if_result(_still_running),
            before_sleep=lambda state: logger.debug(
                "Veo operation %s still running (poll %d)",
                operation.name,
                state.attempt_number,
            ),
        )
        try:
            return await retrying(self._poll, operation)
        except RetryError as exc:
            raise VideoGenerationTimeoutError(
                detail=(
                    f"Video generation did not finish within {self._max_poll_attempts} "
                    f"polls or {self._deadline:.0f}s"
                )
            ) from exc

    def _video_urls(self, operation) -> list[str]:
        response = operation.response
        urls: list[str] = []
        for n, generated in enumerate(getattr(response, "generated_videos", None) or []):
            uri = generated.video.uri if generated.video else None
            if not uri:
                logger.warning("Veo video %d has no URI", n)
                continue
            separator = "&" if "?" in uri else "?"
            urls.append(f"{uri}{separator}key={self._api_key}")
        return urls

    async def generate(
        self, prompt: str | dict[str, Any], options: VideoOptions | None = None
    ) -> list[str]:
        """Submit a Veo job for *prompt* and wait for its videos."""
        options = options or VideoOptions()
        text = prompt if isinstance(prompt, str) else json.dumps(prompt)

        logger.info("Starting Veo generation: %r", preview(text))
        try:
            operation = await self._client.aio.models.generate_videos(
                model=self._model,
                prompt=text,
                config=self._build_config(options),
            )
            operation = await self._wait_for(operation)
        except VideoGenerationTimeoutError:
            logger.error("Veo generation timed out")
            raise
        except Exception as exc:
            logger.error("Veo request failed: %s", exc)
            raise VideoGenerationError(detail=f"Veo request failed: {exc}") from exc

        if operation.error:
            logger.error("Veo operation %s failed: %s", operation.name, operation.error)
            raise VideoGenerationError(detail=f"Veo reported an error: {operation.error}")

        urls = self._video_urls(operation)
        logger.info("Veo generation finished with %d video(s)", len(urls))
        return urls
