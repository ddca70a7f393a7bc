"""
Abstract base class for text-to-video providers.

Generation is a long-running remote job; implementations block (via
polling) until the job finishes and return playable URLs.
"""

from abc import ABC, abstractmethod
from typing import Any

from dreamscape.core.models import VideoOptions


class BaseVideoGenerator(ABC):
    """Interface that every video provider must implement."""

    @abstractmethod
    async def generate(
        self, prompt: str | dict[str, Any], options: VideoOptions | None = None
    ) -> list[str]:
        """Generate video(s) for *prompt*.

        Args:
            prompt: Free text, or a JSON document that is serialized first.
            options: Aspect ratio, person policy, count, negative prompt.

        Returns:
            URLs of the generated videos (possibly empty).

        Raises:
            VideoGenerationError: If the provider reports a failure.
            VideoGenerationTimeoutError: If the job exceeds its poll budget.
        """
