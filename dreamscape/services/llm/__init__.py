"""
Text models behind emoji detection and dream structuring.

``create_llm`` resolves the ``llm_provider`` setting to a provider
instance. SDKs are imported lazily, so only the selected provider's
package has to be importable.
"""

from .base import BaseLLM

__all__ = ["BaseLLM", "create_llm"]


def create_llm(provider: str, **kwargs) -> BaseLLM:
    """Build the LLM named by *provider* ("groq", "claude" or "ollama").

    Raises:
        ValueError: If provider is unknown.
    """
    name = provider.strip().lower()
    if name == "groq":
        from .groq import GroqLLM

        return GroqLLM(**kwargs)
    if name == "claude":
        from .claude import ClaudeLLM

        return ClaudeLLM(**kwargs)
    if name == "ollama":
        from .ollama import OllamaLLM

        return OllamaLLM(**kwargs)
    raise ValueError(f"Unknown LLM provider: {provider}")
