"""Embedding provider factory — registry and lazy import.

Every call builds a fresh provider; the caller owns it and passes it to
the pipelines explicitly.
"""

from __future__ import annotations

import importlib
import logging

from docchat.embeddings.base import EmbeddingProvider

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Provider registry: (provider_key, module_path, class_name)
# ---------------------------------------------------------------------------

_PROVIDER_REGISTRY: list[tuple[str, str, str]] = [
    ("openai", "docchat.embeddings.openai_provider", "OpenAIEmbeddingProvider"),
    ("ollama", "docchat.embeddings.ollama_provider", "OllamaEmbeddingProvider"),
    ("huggingface", "docchat.embeddings.huggingface_provider", "HuggingFaceEmbeddingProvider"),
]


def get_embedding_provider(
    provider: str = "openai",
    **kwargs,
) -> EmbeddingProvider:
    """Get an embedding provider by name.

    Args:
        provider: One of ``openai``, ``ollama``, ``huggingface``.
        **kwargs: Passed to the provider constructor. ``None`` values are
            dropped so the provider's own defaults apply.

    Returns:
        An ``EmbeddingProvider`` instance.
    """
    key = provider.lower()
    kwargs = {k: v for k, v in kwargs.items() if v is not None}

    for reg_key, module_path, cls_name in _PROVIDER_REGISTRY:
        if reg_key == key:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, cls_name)
            logger.debug("Creating embedding provider %s", cls_name)
            return cls(**kwargs)

    available = [k for k, _, _ in _PROVIDER_REGISTRY]
    raise ValueError(f"Unknown embedding provider '{provider}'. Available: {available}")


def available_providers() -> list[str]:
    """Return names of registered embedding providers."""
    return [k for k, _, _ in _PROVIDER_REGISTRY]
