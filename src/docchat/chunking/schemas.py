"""Data models for chunks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def make_chunk_id(file_id: str, page: int, chunk_index: int) -> str:
    """Deterministic chunk id, namespaced by the owning file."""
    return f"{file_id}-{page}-{chunk_index}"


@dataclass(frozen=True)
class ChunkMetadata:
    """Ownership and position metadata stored alongside each embedding.

    ``user_id`` is never None: ``""`` is the explicit no-owner value because
    the vector index rejects null metadata. ``folder_id`` is None when the
    document is not in a folder and is then left out of the payload.
    """

    file_id: str = ""
    page: int = 1
    chunk_index: int = 0
    user_id: str = ""
    folder_id: str | None = None

    def to_payload(self, text: str | None = None) -> dict[str, Any]:
        """Serialize to the index's flat metadata format (no null values)."""
        payload: dict[str, Any] = {
            "fileId": self.file_id,
            "page": self.page,
            "chunk": self.chunk_index,
            "userId": self.user_id or "",
        }
        if text is not None:
            payload["text"] = text
        if self.folder_id:
            payload["folderId"] = self.folder_id
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ChunkMetadata:
        return cls(
            file_id=str(payload.get("fileId", "")),
            page=int(payload.get("page", 1)),
            chunk_index=int(payload.get("chunk", 0)),
            user_id=str(payload.get("userId", "")),
            folder_id=payload.get("folderId") or None,
        )


@dataclass
class Chunk:
    """A single retrievable piece of a document page."""

    text: str
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)
    chunk_index: int = 0
    total_chunks: int = 0

    @property
    def id(self) -> str:
        return make_chunk_id(self.metadata.file_id, self.metadata.page, self.chunk_index)
