"""Unit tests for DreamStructurer."""

import json

import pytest

from dreamscape.core.exceptions import StructuringError
from dreamscape.services.analysis.structurer import DreamStructurer


class TestDreamStructurer:
    async def test_valid_json_reply(self, mock_llm):
        structure = {"title": "Flight", "events": [{"order": 1, "action": "takes off"}]}
        mock_llm.generate.return_value = json.dumps(structure)

        result = await DreamStructurer(mock_llm).structure("I took off and flew")

        assert result == structure
        args, kwargs = mock_llm.generate.call_args
        assert "I took off and flew" in args[0]
        assert kwargs["max_tokens"] == 2000
        assert "JSON" in kwargs["system"]

    async def test_fenced_reply(self, mock_llm):
        mock_llm.generate.return_value = '```json\n{"title": "Flight"}\n```'
        assert await DreamStructurer(mock_llm).structure("flying") == {"title": "Flight"}

    @pytest.mark.parametrize("reply", ["I cannot do that.", "", "[1, 2]", "{oops"])
    async def test_unusable_reply_is_none(self, mock_llm, reply):
        mock_llm.generate.return_value = reply
        assert await DreamStructurer(mock_llm).structure("flying") is None

    async def test_blank_transcript_skips_provider(self, mock_llm):
        assert await DreamStructurer(mock_llm).structure("   ") is None
        mock_llm.generate.assert_not_called()

    async def test_provider_failure_raises(self, mock_llm):
        mock_llm.generate.side_effect = RuntimeError("Groq API error")
        with pytest.raises(StructuringError):
            await DreamStructurer(mock_llm).structure("flying")
