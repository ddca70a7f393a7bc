"""Ollama provider for a locally running model server (``ollama.AsyncClient``)."""

import logging

from ollama import AsyncClient, ResponseError

from dreamscape.core.config import get_settings
from dreamscape.services.llm.base import BaseLLM, chat_messages, generation_params

logger = logging.getLogger(__name__)


class OllamaLLM(BaseLLM):
    """Local Ollama chat model. ``max_tokens`` maps to Ollama's ``num_predict``."""

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float = 0.1,
    ) -> None:
        settings = get_settings()
        self._base_url = base_url or settings.ollama_base_url
        self._model = model or settings.ollama_model
        self._temperature = temperature
        self._client = AsyncClient(host=self._base_url)

    async def generate(self, prompt: str, **kwargs) -> str:
        params = generation_params(kwargs, self._temperature)
        options: dict = {"temperature": params.temperature}
        if params.max_tokens is not None:
            options["num_predict"] = params.max_tokens

        try:
            response = await self._client.chat(
                model=self._model,
                messages=chat_messages(prompt, params.system),
                options=options,
            )
        except ResponseError as exc:
            logger.error("Ollama rejected request for %s: %s", self._model, exc.error)
            raise RuntimeError(f"Ollama error: {exc.error}") from exc
        except (ConnectionError, TimeoutError) as exc:
            logger.warning("Ollama at %s unreachable: %s", self._base_url, exc)
            raise type(exc)(f"Ollama at {self._base_url} unreachable: {exc}") from exc
        except Exception as exc:
            logger.error("Unexpected Ollama error: %s", exc)
            raise RuntimeError(f"Ollama error: {exc}") from exc

        return (response.message.content or "").strip()
