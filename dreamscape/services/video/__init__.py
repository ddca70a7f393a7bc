"""Text-to-video generation and thumbnail capture."""

from .base import BaseVideoGenerator

__all__ = ["BaseVideoGenerator", "create_video_generator"]


def create_video_generator(provider: str, **kwargs) -> BaseVideoGenerator:
    if provider.strip().lower() == "veo":
        from .veo import VeoVideoGenerator

        return VeoVideoGenerator(**kwargs)
    raise ValueError(f"Unknown video provider: {provider}")
