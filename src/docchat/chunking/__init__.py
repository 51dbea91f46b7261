"""Page-level text chunking with overlap."""

from docchat.chunking.base import BaseChunker
from docchat.chunking.factory import available_chunkers, get_chunker
from docchat.chunking.schemas import Chunk, ChunkMetadata, make_chunk_id

__all__ = [
    "BaseChunker",
    "Chunk",
    "ChunkMetadata",
    "available_chunkers",
    "get_chunker",
    "make_chunk_id",
]
