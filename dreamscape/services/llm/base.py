"""
Abstract base class for LLM providers.

Emoji detection and structuring only ever need one system prompt, one user
prompt and a text reply, so every provider (Groq, Claude, Ollama) is reduced
to ``generate()``. The helpers below normalise the keyword arguments and the
chat message list the three SDKs share.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class GenerationParams:
    system: str | None
    temperature: float
    max_tokens: int | None


def generation_params(kwargs: dict[str, Any], default_temperature: float) -> GenerationParams:
    """Pull ``system``, ``temperature`` and ``max_tokens`` out of ``generate()`` kwargs."""
    temperature = kwargs.get("temperature")
    return GenerationParams(
        system=kwargs.get("system") or None,
        temperature=default_temperature if temperature is None else temperature,
        max_tokens=kwargs.get("max_tokens"),
    )


def chat_messages(prompt: str, system: str | None = None) -> list[dict[str, str]]:
    messages = [{"role": "system", "content": system}] if system else []
    messages.append({"role": "user", "content": prompt})
    return messages


class BaseLLM(ABC):
    """Interface that every LLM provider must implement."""

    @abstractmethod
    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a free-form text response.

        Args:
            prompt: The user prompt to send to the model.
            **kwargs: ``system``, ``temperature``, ``max_tokens``.

        Returns:
            The model's text response, stripped (may be empty).

        Raises:
            TimeoutError: The provider did not answer in time.
            ConnectionError: The provider is unreachable or rate limited.
            RuntimeError: Any other provider failure.
        """
