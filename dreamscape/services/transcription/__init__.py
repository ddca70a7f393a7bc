"""Speech-to-text for whole recordings and live chunks."""

from .base import BaseSTT

__all__ = ["BaseSTT", "create_stt"]


def create_stt(provider: str, **kwargs) -> BaseSTT:
    """Build the STT provider named by *provider*; only "groq" exists today."""
    if provider.strip().lower() == "groq":
        from .groq import GroqSTT

        return GroqSTT(**kwargs)
    raise ValueError(f"Unknown STT provider: {provider}")
