"""Single-shot LLM analyses of a dream transcript: emoji and structure."""

from .emoji import EmojiDetector
from .structurer import DreamStructurer

__all__ = ["DreamStructurer", "EmojiDetector"]
