"""Abstract base class for all chunkers."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Iterator

from docchat.chunking.schemas import Chunk, ChunkMetadata


class BaseChunker(ABC):
    """Interface for text chunking strategies.

    Subclasses implement ``split``, a generator over chunk strings. Calling
    it again on the same text restarts the sequence and yields the same
    chunks.
    """

    @abstractmethod
    def split(self, text: str) -> Iterator[str]:
        """Lazily split text into chunk strings.

        Args:
            text: The text of one page/unit.

        Yields:
            Chunk strings in document order. Blank text yields nothing.
        """

    def chunk(self, text: str, metadata: ChunkMetadata | None = None) -> list[Chunk]:
        """Split text into numbered ``Chunk`` objects.

        Args:
            text: The text of one page/unit.
            metadata: Optional metadata to propagate to each chunk. The
                ``chunk_index`` field is set per chunk.

        Returns:
            List of ``Chunk`` objects.
        """
        meta = metadata or ChunkMetadata()
        chunks = [
            Chunk(text=piece, metadata=dataclasses.replace(meta, chunk_index=i), chunk_index=i)
            for i, piece in enumerate(self.split(text))
        ]
        for c in chunks:
            c.total_chunks = len(chunks)
        return chunks
