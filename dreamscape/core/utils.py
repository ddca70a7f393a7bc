"""Shared utility functions for Dreamscape."""

import json
import re

_AUDIO_EXTENSIONS = ("webm", "mp3", "ogg", "m4a")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping JSON from LLM responses."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```\w*\n?", "", text)
        text = re.sub(r"\n?```$", "", text)
    return text.strip()


def parse_json_object(text: str | None) -> dict | None:
    """Parse an LLM reply into a JSON object, or return None.

    Falls back to the outermost ``{...}`` span when the model wrapped the
    object in prose. Anything that is not a JSON object yields None.
    """
    if not text:
        return None
    raw = strip_code_fences(text)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        match = re.search(r"\{[\s\S]*\}", raw)
        if not match:
            return None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
    return data if isinstance(data, dict) else None


def sniff_audio_extension(content_type: str | None, filename: str | None) -> str:
    """Pick a file extension for an upload from its content type or filename.

    Defaults to ``wav`` when neither hints at a known container.
    """
    content_type = (content_type or "").lower()
    filename = (filename or "").lower()
    for ext in _AUDIO_EXTENSIONS:
        if ext in content_type or f".{ext}" in filename:
            return ext
    return "wav"


def preview(text: str, limit: int = 100) -> str:
    """Shorten *text* for log lines."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
