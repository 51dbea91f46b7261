"""Data models for vector store operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from docchat.chunking.schemas import ChunkMetadata


@dataclass
class VectorRecord:
    """A document chunk with its embedding, ready for upsert."""

    id: str
    text: str
    embedding: list[float]
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)

    def payload(self) -> dict[str, Any]:
        return self.metadata.to_payload(self.text)


@dataclass(frozen=True)
class SearchResult:
    """A single match from the vector store."""

    id: str
    text: str
    score: float
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)


@dataclass(frozen=True)
class MetadataFilter:
    """Restrict results to one owner and, optionally, one file and/or folder.

    All specified fields must match (AND logic). ``user_id`` is required:
    it is the access-control dimension and is always part of the filter.
    """

    user_id: str
    file_id: str | None = None
    folder_id: str | None = None

    def __post_init__(self) -> None:
        if self.user_id is None:
            raise ValueError("MetadataFilter requires a user_id")

    @classmethod
    def for_scope(
        cls,
        user_id: str,
        file_id: str | None = None,
        folder_id: str | None = None,
    ) -> MetadataFilter:
        """Build the filter for a chat scope.

        - folder chat: ``folderId == folder_id AND userId == user_id``
        - file chat:   ``fileId == file_id AND userId == user_id``
        - neither:     ``userId == user_id``
        """
        if folder_id:
            return cls(user_id=user_id, folder_id=folder_id)
        if file_id:
            return cls(user_id=user_id, file_id=file_id)
        return cls(user_id=user_id)

    @property
    def is_user_wide(self) -> bool:
        return not self.file_id and not self.folder_id

    def matches(self, meta: ChunkMetadata) -> bool:
        """Check if a chunk's metadata matches this filter."""
        if meta.user_id != self.user_id:
            return False
        if self.file_id and meta.file_id != self.file_id:
            return False
        return not (self.folder_id and meta.folder_id != self.folder_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a flat ``{payload_key: value}`` equality dict."""
        d: dict[str, Any] = {}
        if self.file_id:
            d["fileId"] = self.file_id
        if self.folder_id:
            d["folderId"] = self.folder_id
        d["userId"] = self.user_id
        return d

    def to_pinecone(self) -> dict[str, Any]:
        """Convert to Pinecone's filter language."""
        conditions = [{key: {"$eq": value}} for key, value in self.to_dict().items()]
        if len(conditions) == 1:
            return conditions[0]
        return {"$and": conditions}
