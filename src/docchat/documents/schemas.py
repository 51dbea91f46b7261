"""Data models for document extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class FileType(StrEnum):
    """Supported upload formats, keyed by extension."""

    PDF = ".pdf"
    TXT = ".txt"
    DOCX = ".docx"


@dataclass
class LoadResult:
    """Result of extracting text from a single document.

    Attributes:
        page_texts: One string per logical unit, in order. PDFs yield one
            entry per page; TXT and DOCX yield a single entry. Entries may
            be empty (e.g. image-only PDF pages).
        source: Filename or path the bytes came from.
        file_type: Detected format.
        warnings: Non-fatal issues encountered during extraction.
    """

    page_texts: list[str] = field(default_factory=list)
    source: str | None = None
    file_type: FileType | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.page_texts)

    @property
    def char_count(self) -> int:
        return sum(len(p) for p in self.page_texts)

    def has_text(self) -> bool:
        """True if at least one page contains non-whitespace text."""
        return any(p.strip() for p in self.page_texts)
