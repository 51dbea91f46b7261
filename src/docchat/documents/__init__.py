"""Document extraction — PDF, TXT, DOCX to per-page text."""

from docchat.documents.loader import SUPPORTED_EXTENSIONS, DocumentLoader, resolve_file_type
from docchat.documents.schemas import FileType, LoadResult

__all__ = [
    "DocumentLoader",
    "FileType",
    "LoadResult",
    "SUPPORTED_EXTENSIONS",
    "resolve_file_type",
]
