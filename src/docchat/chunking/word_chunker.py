"""Greedy word-packing chunker without overlap.

Packs space-separated words into chunks of at most ``max_chunk_size``
characters. A single word longer than the limit becomes its own chunk.
"""

from __future__ import annotations

from collections.abc import Iterator

from docchat.chunking.base import BaseChunker

MAX_CHUNK_SIZE = 1000


class WordChunker(BaseChunker):
    """Simple length-bounded word splitter."""

    def __init__(self, max_chunk_size: int = MAX_CHUNK_SIZE):
        if max_chunk_size <= 0:
            raise ValueError(f"max_chunk_size must be positive, got {max_chunk_size}")
        self.max_chunk_size = max_chunk_size

    def split(self, text: str) -> Iterator[str]:
        current: list[str] = []
        length = 0

        for word in text.split():
            added = len(word) + (1 if current else 0)
            if current and length + added > self.max_chunk_size:
                yield " ".join(current)
                current = [word]
                length = len(word)
            else:
                current.append(word)
                length += added

        if current:
            yield " ".join(current)
