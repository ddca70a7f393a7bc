"""
Emoji detection for transcript chunks.

Asks the LLM for the one emoji that best captures a transcript and
normalises the reply down to a single glyph. Detection never fails: any
provider error or unusable reply yields the default glyph.
"""

import logging
import unicodedata

from dreamscape.core.models import DEFAULT_EMOJI
from dreamscape.core.utils import preview
from dreamscape.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an emoji detection system. Analyze the given transcript and return "
    "exactly one most relevant emoji that best represents the content, emotion, "
    "or theme. Only return the emoji character, nothing else."
)

_ZWJ = "\u200d"
_KEYCAP = "\u20e3"
_VARIATION_SELECTORS = ("\ufe0e", "\ufe0f")


def _is_modifier(ch: str) -> bool:
    return ch in _VARIATION_SELECTORS or ch == _KEYCAP or 0x1F3FB <= ord(ch) <= 0x1F3FF


def _is_regional_indicator(ch: str) -> bool:
    return 0x1F1E6 <= ord(ch) <= 0x1F1FF


def _is_pictograph(ch: str) -> bool:
    return unicodedata.category(ch) == "So" or _is_regional_indicator(ch) or ord(ch) >= 0x1F000


def first_glyph(text: str) -> str | None:
    """Return the first emoji glyph in *text*, joined sequences included.

    Handles variation selectors, skin-tone modifiers, keycaps, ZWJ
    sequences and flag pairs. Returns None when *text* holds no emoji.
    """
    start = next((i for i, ch in enumerate(text) if _is_pictograph(ch)), None)
    if start is None:
        return None

    glyph = text[start]
    i = start + 1
    if _is_regional_indicator(glyph) and i < len(text) and _is_regional_indicator(text[i]):
        return glyph + text[i]

    while i < len(text):
        ch = text[i]
        if _is_modifier(ch):
            glyph += ch
            i += 1
        elif ch == _ZWJ and i + 1 < len(text):
            glyph += ch + text[i + 1]
            i += 2
        else:
            break
    return glyph


class EmojiDetector:
    """Maps a transcript to exactly one emoji glyph."""

    def __init__(self, llm: BaseLLM) -> None:
        self._llm = llm

    async def detect(self, transcript: str | None) -> str:
        """Return one emoji for *transcript*.

        Blank transcripts short-circuit to the default glyph without a
        provider call.
        """
        if not transcript or not transcript.strip():
            logger.debug("Empty transcript, returning default emoji")
            return DEFAULT_EMOJI

        try:
            reply = await self._llm.generate(
                f'Analyze this transcript and return one relevant emoji: "{transcript}"',
                system=SYSTEM_PROMPT,
                temperature=0.1,
                max_tokens=5,
            )
        except Exception:
            logger.warning("Emoji detection failed for %r", preview(transcript), exc_info=True)
            return DEFAULT_EMOJI

        emoji = first_glyph(reply or "")
        logger.debug("Emoji detected: %s", emoji or DEFAULT_EMOJI)
        return emoji or DEFAULT_EMOJI
