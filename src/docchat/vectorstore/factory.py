"""Vector store factory — registry and lazy import."""

from __future__ import annotations

import importlib
import logging

from docchat.vectorstore.base import VectorStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Store registry: (store_key, module_path, class_name)
# ---------------------------------------------------------------------------

_STORE_REGISTRY: list[tuple[str, str, str]] = [
    ("faiss", "docchat.vectorstore.faiss_store", "FAISSStore"),
    ("qdrant", "docchat.vectorstore.qdrant_store", "QdrantStore"),
    ("pinecone", "docchat.vectorstore.pinecone_store", "PineconeStore"),
]


def get_vector_store(
    provider: str = "faiss",
    **kwargs,
) -> VectorStore:
    """Get a vector store by name.

    Args:
        provider: One of ``faiss``, ``qdrant``, ``pinecone``.
        **kwargs: Passed to the store constructor. ``None`` values are
            dropped so the store's own defaults apply.

    Returns:
        A ``VectorStore`` instance.
    """
    key = provider.lower()
    kwargs = {k: v for k, v in kwargs.items() if v is not None}

    for reg_key, module_path, cls_name in _STORE_REGISTRY:
        if reg_key == key:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, cls_name)
            logger.debug("Creating vector store %s", cls_name)
            return cls(**kwargs)

    available = [k for k, _, _ in _STORE_REGISTRY]
    raise ValueError(f"Unknown vector store '{provider}'. Available: {available}")


def available_stores() -> list[str]:
    """Return names of registered vector stores."""
    return [k for k, _, _ in _STORE_REGISTRY]
