"""Data models for retrieval operations."""

from __future__ import annotations

from dataclasses import dataclass, field

from docchat.vectorstore.schemas import SearchResult


@dataclass(frozen=True)
class RetrievalScope:
    """Which documents a chat turn may draw on.

    Either a single ``file_id`` or a ``folder_id`` with the ids of the files
    that belong to it. An empty scope means "all of the user's documents",
    which the retriever only honours when unscoped search is enabled.
    """

    file_id: str | None = None
    folder_id: str | None = None
    member_file_ids: tuple[str, ...] = ()

    @classmethod
    def for_file(cls, file_id: str) -> RetrievalScope:
        return cls(file_id=file_id)

    @classmethod
    def for_folder(cls, folder_id: str, member_file_ids: list[str] | tuple[str, ...]) -> RetrievalScope:
        return cls(folder_id=folder_id, member_file_ids=tuple(member_file_ids))

    @property
    def is_folder(self) -> bool:
        return bool(self.folder_id)

    @property
    def is_unscoped(self) -> bool:
        return not self.file_id and not self.folder_id


@dataclass
class RetrievalResult:
    """Result of a retrieval operation."""

    query: str
    matches: list[SearchResult] = field(default_factory=list)
    files_searched: int = 0
    files_with_hits: int = 0
    failed_files: list[str] = field(default_factory=list)
