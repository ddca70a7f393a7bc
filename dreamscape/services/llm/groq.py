"""
Groq LLM provider implementation.

Uses the official Groq SDK (``groq.AsyncGroq``) for chat completions.
SDK exceptions are translated to standard Python exceptions so callers
do not depend on the SDK.
"""

import logging

from groq import APIConnectionError, APITimeoutError, AsyncGroq, RateLimitError

from dreamscape.core.config import get_settings
from dreamscape.services.llm.base import BaseLLM, chat_messages, generation_params

logger = logging.getLogger(__name__)


class GroqLLM(BaseLLM):
    """Groq chat-completions provider."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float = 0.1,
    ) -> None:
        settings = get_settings()
        self._model = model or settings.groq_chat_model
        self._temperature = temperature
        self._client = AsyncGroq(api_key=api_key or settings.groq_api_key)

    async def generate(self, prompt: str, **kwargs) -> str:
        """Plain-text chat completion. Returns the content string."""
        params = generation_params(kwargs, self._temperature)
        request: dict = {
            "model": self._model,
            "messages": chat_messages(prompt, params.system),
            "temperature": params.temperature,
        }
        if params.max_tokens is not None:
            request["max_tokens"] = params.max_tokens

        try:
            resp = await self._client.chat.completions.create(**request)
        except APITimeoutError as exc:
            logger.warning("Groq API timeout: %s", exc)
            raise TimeoutError(f"Groq API request timed out: {exc}") from exc
        except (APIConnectionError, RateLimitError) as exc:
            logger.warning("Groq API unavailable: %s", exc)
            raise ConnectionError(f"Groq API unavailable: {exc}") from exc
        except Exception as exc:
            logger.error("Unexpected Groq API error: %s", exc)
            raise RuntimeError(f"Groq API error: {exc}") from exc

        if not resp.choices:
            return ""
        return (resp.choices[0].message.content or "").strip()
