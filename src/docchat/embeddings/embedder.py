"""Embedder — provider call plus the fixed-dimension check.

The index is created for one dimension; every vector that reaches it
must have exactly that length. A mismatch raises ``DimensionMismatch``
instead of being padded or truncated.
"""

from __future__ import annotations

import logging

from docchat.embeddings.base import EmbeddingProvider
from docchat.exceptions import DimensionMismatch, EmbeddingProviderError

logger = logging.getLogger(__name__)


class Embedder:
    """Validating wrapper around an ``EmbeddingProvider``."""

    def __init__(self, provider: EmbeddingProvider, dimension: int | None = None):
        self.provider = provider
        self.dimension = dimension or provider.dimension

    async def embed(self, text: str) -> list[float]:
        """Embed one document chunk."""
        self._require_text(text)
        vectors = await self._embed_batch([text])
        return self._validate(vectors[0])

    async def embed_query(self, query: str) -> list[float]:
        """Embed a search query."""
        self._require_text(query)
        return self._validate(await self.provider.embed_query(query))

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    async def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        vectors = await self.provider.embed_texts(texts)
        if len(vectors) != len(texts):
            raise EmbeddingProviderError(
                f"Provider returned {len(vectors)} vectors for {len(texts)} texts",
                {"provider": self.provider.provider_name()},
            )
        return vectors

    def _validate(self, vector: list[float]) -> list[float]:
        if len(vector) != self.dimension:
            logger.error(
                "Embedding dimension mismatch from %s: got %d, expected %d",
                self.provider.provider_name(),
                len(vector),
                self.dimension,
            )
            raise DimensionMismatch(self.dimension, len(vector))
        return [float(x) for x in vector]

    @staticmethod
    def _require_text(text: str) -> None:
        if not text or not text.strip():
            raise ValueError("Cannot embed blank text")
