"""Abstract base class for embedding providers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Interface for text embedding models.

    Implementations convert their transport/auth failures into
    ``EmbeddingProviderError``.
    """

    @abstractmethod
    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of texts.

        Args:
            texts: Strings to embed.

        Returns:
            List of embedding vectors (same order as input).
        """

    async def embed_query(self, query: str) -> list[float]:
        """Embed a single query string.

        Some providers use different models/prefixes for queries vs documents.
        """
        vectors = await self.embed_texts([query])
        return vectors[0]

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimensionality."""

    async def aclose(self) -> None:
        """Release network resources held by the provider."""

    @classmethod
    def provider_name(cls) -> str:
        """Return human-readable provider name."""
        return cls.__name__
