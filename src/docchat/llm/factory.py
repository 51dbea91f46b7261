"""Chat provider factory — registry and lazy import."""

from __future__ import annotations

import importlib
import logging

from docchat.llm.base import LLMProvider

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Provider registry: (provider_key, module_path, class_name)
# ---------------------------------------------------------------------------

_PROVIDER_REGISTRY: list[tuple[str, str, str]] = [
    ("openai", "docchat.llm.openai_provider", "OpenAILLMProvider"),
    ("anthropic", "docchat.llm.anthropic_provider", "AnthropicLLMProvider"),
    ("ollama", "docchat.llm.ollama_provider", "OllamaLLMProvider"),
]


def get_llm_provider(
    provider: str = "openai",
    **kwargs,
) -> LLMProvider:
    """Get a chat provider by name.

    Args:
        provider: One of ``openai``, ``anthropic``, ``ollama``.
        **kwargs: Passed to the provider constructor; ``None`` values are
            dropped.

    Returns:
        An ``LLMProvider`` instance.
    """
    key = provider.lower()
    kwargs = {k: v for k, v in kwargs.items() if v is not None}

    for reg_key, module_path, cls_name in _PROVIDER_REGISTRY:
        if reg_key == key:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, cls_name)
            logger.debug("Creating chat provider %s", cls_name)
            return cls(**kwargs)

    available = [k for k, _, _ in _PROVIDER_REGISTRY]
    raise ValueError(f"Unknown LLM provider '{provider}'. Available: {available}")


def available_providers() -> list[str]:
    """Return names of registered chat providers."""
    return [k for k, _, _ in _PROVIDER_REGISTRY]
