"""Recursive character chunker with overlap.

Thin wrapper over LangChain's ``RecursiveCharacterTextSplitter``: splits on
the coarsest separator present (paragraphs, then lines, then words, then
characters), packs pieces up to ``chunk_size`` characters and repeats up to
``chunk_overlap`` trailing characters at the start of the next chunk.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from langchain_text_splitters import RecursiveCharacterTextSplitter

from docchat.chunking.base import BaseChunker

CHUNK_SIZE = 1000
CHUNK_OVERLAP = 200
DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", " ", "")


class RecursiveCharacterChunker(BaseChunker):
    """Character-bounded chunker that recurses through a separator list."""

    def __init__(
        self,
        chunk_size: int = CHUNK_SIZE,
        chunk_overlap: int = CHUNK_OVERLAP,
        separators: Sequence[str] = DEFAULT_SEPARATORS,
    ):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be >= 0 and smaller "
                f"than chunk_size ({chunk_size})"
            )
        if not separators:
            raise ValueError("At least one separator is required")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = tuple(separators)
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=list(self.separators),
        )

    def split(self, text: str) -> Iterator[str]:
        if not text or not text.strip():
            return
        for piece in self._splitter.split_text(text):
            # Pieces that could not be split further keep their separator
            piece = piece.strip()
            if piece:
                yield piece
