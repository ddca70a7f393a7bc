"""Video prompt composition from a structured dream and the dreamer profile."""

import json
from typing import Any

from dreamscape.core.models import DreamerProfile


def compose_video_prompt(structured: dict[str, Any], profile: DreamerProfile | None = None) -> str:
    """Render the text prompt sent to the video provider.

    The profile block comes first so its boundaries frame the scene;
    triggers are phrased as content to avoid.
    """
    dream = json.dumps(structured, indent=2, ensure_ascii=False)
    if profile is None or profile == DreamerProfile():
        return f"Dream Structure:\n{dream}"

    context = (
        "Dreamer Profile:\n"
        f"- Self-description: {profile.self_description or 'N/A'}\n"
        f"- Visual/Artistic Style: {profile.visual_style.value or 'N/A'}\n"
        f"- Triggers/Boundaries (AVOID in all outputs): {profile.triggers_and_boundaries or 'N/A'}"
    )
    return f"{context}\n\nDream Structure:\n{dream}"
