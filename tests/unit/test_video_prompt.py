"""Unit tests for video prompt composition."""

import json

from dreamscape.core.models import DreamerProfile, VisualStyle
from dreamscape.services.video.prompt import compose_video_prompt

STRUCTURE = {"title": "Flight", "description": "Soaring over mountains"}


def test_without_profile_is_just_the_structure():
    prompt = compose_video_prompt(STRUCTURE)
    assert prompt.startswith("Dream Structure:\n")
    assert json.loads(prompt.split("\n", 1)[1]) == STRUCTURE


def test_default_profile_adds_nothing():
    assert compose_video_prompt(STRUCTURE, DreamerProfile()) == compose_video_prompt(STRUCTURE)


def test_profile_block_precedes_structure():
    profile = DreamerProfile(
        self_description="A night-shift nurse",
        triggers_and_boundaries="spiders",
        visual_style=VisualStyle.surreal,
    )
    prompt = compose_video_prompt(STRUCTURE, profile)

    assert prompt.index("Dreamer Profile:") < prompt.index("Dream Structure:")
    assert "A night-shift nurse" in prompt
    assert "surreal" in prompt
    assert "AVOID" in prompt and "spiders" in prompt
