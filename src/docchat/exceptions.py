"""Exception hierarchy for the ingestion and retrieval pipelines.

Every error carries a human-readable message plus an optional ``details``
dict so callers can log or surface context without string parsing.
"""

from __future__ import annotations

from typing import Any


class DocChatError(Exception):
    """Base exception for all docchat errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ---------------------------------------------------------------------------
# Ingestion input errors
# ---------------------------------------------------------------------------


class UnsupportedFileType(DocChatError):
    """Raised when a document extension is not in the supported set."""

    def __init__(self, extension: str, supported: list[str] | None = None) -> None:
        details: dict[str, Any] = {"extension": extension}
        if supported:
            details["supported"] = supported
        super().__init__(f"Unsupported file type '{extension}'", details)
        self.extension = extension


class ExtractionFailed(DocChatError):
    """Raised when document bytes cannot be parsed into text."""


class NoTextContent(DocChatError):
    """Raised when extraction succeeded but every page is blank."""


class DocumentTooLarge(DocChatError):
    """Raised when a document exceeds the configured size limit."""

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        super().__init__(
            f"Document is {size_bytes} bytes, limit is {limit_bytes}",
            {"size_bytes": size_bytes, "limit_bytes": limit_bytes},
        )


class DimensionMismatch(DocChatError):
    """Raised when an embedding does not have the configured dimension.

    Always fatal: a wrong-sized vector would be rejected by (or corrupt)
    the shared index.
    """

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Embedding dimension mismatch: got {actual}, expected {expected}",
            {"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


# ---------------------------------------------------------------------------
# External provider errors
# ---------------------------------------------------------------------------


class ProviderError(DocChatError):
    """Base for transport/auth failures from an external service."""


class EmbeddingProviderError(ProviderError):
    """The embedding provider failed or returned a non-success response."""


class VectorStoreError(ProviderError):
    """The vector index failed or returned a non-success response."""


class ChatProviderError(ProviderError):
    """The chat completion provider failed or returned a non-success response."""
