"""
Dream transcript structuring.

Turns a raw dream transcript into a detailed JSON document (events,
elements, emotions, settings, symbols) with at least ``title`` and
``description`` requested at the top level. The model is free-form, so
the result is either a parsed JSON object or None, never a parse error.
"""

import logging

from dreamscape.core.exceptions import StructuringError
from dreamscape.core.utils import parse_json_object, preview
from dreamscape.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a dream analysis system that converts raw dream transcripts into "
    "detailed, structured JSON data.\n\n"
    "Your task is to analyze the transcript and create a comprehensive JSON "
    "structure that captures:\n"
    "1. Sequential order of events\n"
    "2. All elements mentioned (people, places, objects, emotions)\n"
    "3. Actions and interactions\n"
    "4. Environmental details\n"
    "5. Emotional states and themes\n"
    "6. Temporal relationships\n"
    "7. Spatial relationships\n"
    "8. Symbolic elements\n\n"
    'Always include a short "title" and a one or two sentence "description" '
    "as top-level string fields.\n\n"
    "Return ONLY valid JSON. Do not include any explanatory text, markdown "
    "formatting, or code blocks. The JSON should be immediately parseable."
)


class DreamStructurer:
    """Converts dream transcripts into semi-structured JSON via an LLM."""

    def __init__(self, llm: BaseLLM, max_tokens: int = 2000) -> None:
        self._llm = llm
        self._max_tokens = max_tokens

    async def structure(self, transcript: str | None) -> dict | None:
        """Structure *transcript* into a JSON object.

        Returns:
            The parsed object, or None when the transcript is blank or the
            model reply is not a JSON object.

        Raises:
            StructuringError: If the LLM call itself fails.
        """
        if not transcript or not transcript.strip():
            logger.info("Empty transcript, cannot structure")
            return None

        prompt = (
            "Turn this raw transcript into a JSON. It should note the sequential "
            "order of events, all of the elements, etc.. to make it extremely "
            f'detailed: "{transcript}"'
        )
        try:
            reply = await self._llm.generate(
                prompt,
                system=SYSTEM_PROMPT,
                temperature=0.1,
                max_tokens=self._max_tokens,
            )
        except Exception as exc:
            raise StructuringError(detail=f"LLM call failed: {exc}") from exc

        data = parse_json_object(reply)
        if data is None:
            logger.error("Unparseable structuring reply: %r", preview(reply or "", 200))
            return None

        logger.info("Transcript structured with %d top-level keys", len(data))
        return data
