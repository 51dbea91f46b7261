"""Abstract base class for vector stores."""

from __future__ import annotations

from abc import ABC, abstractmethod

from docchat.vectorstore.schemas import MetadataFilter, SearchResult, VectorRecord

# Provider limit on records per upsert call
UPSERT_BATCH_SIZE = 10


class VectorStore(ABC):
    """Interface for vector store backends.

    ``upsert`` is idempotent by record id: writing the same id twice
    leaves one entry holding the second write. Implementations convert
    backend failures into ``VectorStoreError``.
    """

    @abstractmethod
    async def upsert(self, records: list[VectorRecord]) -> int:
        """Insert or replace records.

        Args:
            records: Chunks with embeddings.

        Returns:
            Number of records written.
        """

    @abstractmethod
    async def query(
        self,
        query_embedding: list[float],
        metadata_filter: MetadataFilter,
        top_k: int = 3,
        include_metadata: bool = True,
    ) -> list[SearchResult]:
        """Search for similar chunks.

        Args:
            query_embedding: The query vector.
            metadata_filter: Owner/scope restriction; always applied.
            top_k: Maximum results to return.
            include_metadata: Whether to return text and metadata.

        Returns:
            List of ``SearchResult`` sorted by similarity (highest first).
        """

    @abstractmethod
    async def delete(self, ids: list[str]) -> int:
        """Delete records by id.

        Returns:
            Number of records deleted (or requested, where the backend
            does not report it).
        """

    @abstractmethod
    async def delete_where(self, metadata_filter: MetadataFilter) -> None:
        """Delete every record matching the filter."""

    @abstractmethod
    async def count(self) -> int:
        """Return the number of records in the store."""

    @abstractmethod
    async def clear(self) -> None:
        """Delete all records."""

    async def aclose(self) -> None:
        """Release network resources held by the store."""

    def save(self, path: str) -> None:
        """Persist the store to disk (optional)."""
        raise NotImplementedError(f"{self.__class__.__name__} does not support save()")

    def load(self, path: str) -> None:
        """Load the store from disk (optional)."""
        raise NotImplementedError(f"{self.__class__.__name__} does not support load()")

    @classmethod
    def store_name(cls) -> str:
        """Return human-readable store name."""
        return cls.__name__
