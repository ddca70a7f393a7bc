"""Claude provider over the Anthropic Messages API (``anthropic.AsyncAnthropic``)."""

import asyncio
import logging

from anthropic import APIConnectionError, APITimeoutError, AsyncAnthropic, RateLimitError

from dreamscape.core.config import get_settings
from dreamscape.services.llm.base import BaseLLM, chat_messages, generation_params

logger = logging.getLogger(__name__)


class ClaudeLLM(BaseLLM):
    """Anthropic Messages API; at most ``max_concurrent`` requests in flight.

    The system prompt goes in the request's ``system`` field rather than the
    message list, and ``max_tokens`` is mandatory, so it falls back to the
    instance default.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.1,
        max_concurrent: int = 5,
    ) -> None:
        settings = get_settings()
        self._model = model or settings.claude_model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._client = AsyncAnthropic(api_key=api_key or settings.claude_api_key)

    async def generate(self, prompt: str, **kwargs) -> str:
        params = generation_params(kwargs, self._temperature)
        request: dict = {
            "model": self._model,
            "max_tokens": params.max_tokens or self._max_tokens,
            "temperature": params.temperature,
            "messages": chat_messages(prompt),
        }
        if params.system:
            request["system"] = params.system

        async with self._semaphore:
            try:
                response = await self._client.messages.create(**request)
            except APITimeoutError as exc:
                logger.warning("Claude request to %s timed out", self._model)
                raise TimeoutError(f"Claude request timed out: {exc}") from exc
            except (APIConnectionError, RateLimitError) as exc:
                logger.warning("Claude unavailable (%s): %s", type(exc).__name__, exc)
                raise ConnectionError(f"Claude unavailable: {exc}") from exc
            except Exception as exc:
                logger.error("Claude request failed: %s", exc)
                raise RuntimeError(f"Claude API error: {exc}") from exc

        text = "".join(getattr(block, "text", "") or "" for block in response.content)
        return text.strip()
