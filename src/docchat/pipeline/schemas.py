"""Data models for the ingestion and chat pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from docchat.vectorstore.schemas import SearchResult


class GroundingStatus(StrEnum):
    """How a chat answer relates to the user's documents."""

    GROUNDED = "grounded"
    NO_GROUNDING_FOUND = "no_grounding_found"
    SKIPPED = "skipped"  # no user message to retrieve for


@dataclass
class IngestResult:
    """Result of document ingestion."""

    file_id: str
    source: str
    pages: int = 0
    chunks_created: int = 0
    chunks_stored: int = 0
    batches: int = 0
    warnings: list[str] = field(default_factory=list)


@dataclass
class ChatResponse:
    """Output of one chat turn."""

    answer: str
    grounding: GroundingStatus
    context: list[SearchResult] = field(default_factory=list)
    system_prompt: str = ""
    files_searched: int = 0
    files_with_hits: int = 0
    model: str = ""

    @property
    def is_grounded(self) -> bool:
        return self.grounding is GroundingStatus.GROUNDED
