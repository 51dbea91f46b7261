"""Embedding providers — OpenAI/Azure, Ollama, HuggingFace."""

from docchat.embeddings.base import EmbeddingProvider
from docchat.embeddings.embedder import Embedder
from docchat.embeddings.factory import available_providers, get_embedding_provider

__all__ = [
    "Embedder",
    "EmbeddingProvider",
    "available_providers",
    "get_embedding_provider",
]
