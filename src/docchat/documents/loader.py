"""Unified document loader — PDF, DOCX, TXT.

Works on in-memory bytes (uploads) as well as filesystem paths, and
returns per-page text so chunks can carry a page number.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from docchat.documents.schemas import FileType, LoadResult
from docchat.exceptions import DocumentTooLarge, ExtractionFailed, UnsupportedFileType

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {ft.value for ft in FileType}


def resolve_file_type(
    filename: str,
    supported: set[str] | None = None,
) -> FileType:
    """Map a filename (or bare extension) to a ``FileType``.

    Raises:
        UnsupportedFileType: if the extension is not supported.
    """
    allowed = supported if supported is not None else SUPPORTED_EXTENSIONS
    ext = Path(filename).suffix.lower() or filename.lower()
    if not ext.startswith("."):
        ext = f".{ext}"
    if ext not in allowed or ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileType(ext, sorted(allowed))
    return FileType(ext)


class DocumentLoader:
    """Load documents into a structured ``LoadResult``."""

    def __init__(
        self,
        supported_formats: list[str] | None = None,
        max_file_size_mb: int | None = None,
    ):
        self.supported = (
            {f.lower() for f in supported_formats}
            if supported_formats
            else set(SUPPORTED_EXTENSIONS)
        )
        self.max_bytes = max_file_size_mb * 1024 * 1024 if max_file_size_mb else None

    def load_file(self, path: str | Path) -> LoadResult:
        """Load a document from a filesystem path."""
        path = Path(path)
        file_type = resolve_file_type(path.name, self.supported)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        result = self._dispatch(path.read_bytes(), file_type)
        result.source = str(path)
        return result

    def load_bytes(self, data: bytes, filename: str) -> LoadResult:
        """Load a document from in-memory bytes."""
        file_type = resolve_file_type(filename, self.supported)
        result = self._dispatch(data, file_type)
        result.source = filename
        return result

    # ------------------------------------------------------------------
    # Private dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, data: bytes, file_type: FileType) -> LoadResult:
        if self.max_bytes is not None and len(data) > self.max_bytes:
            raise DocumentTooLarge(len(data), self.max_bytes)

        handlers = {
            FileType.TXT: self._load_txt,
            FileType.PDF: self._load_pdf,
            FileType.DOCX: self._load_docx,
        }
        result = handlers[file_type](data)
        result.file_type = file_type

        logger.info(
            "Extracted %d page(s), %d chars from %s document",
            result.page_count,
            result.char_count,
            file_type.name,
        )
        return result

    # ------------------------------------------------------------------
    # Format-specific loaders
    # ------------------------------------------------------------------

    @staticmethod
    def _load_txt(data: bytes) -> LoadResult:
        for encoding in ("utf-8", "latin-1", "cp1252"):
            try:
                return LoadResult(page_texts=[data.decode(encoding)])
            except UnicodeDecodeError:
                continue
        return LoadResult(
            page_texts=[data.decode("utf-8", errors="replace")],
            warnings=["Encoding detection fell back to utf-8 with replacements"],
        )

    @staticmethod
    def _load_pdf(data: bytes) -> LoadResult:
        import pdfplumber

        page_texts: list[str] = []
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                for page in pdf.pages:
                    words = page.extract_words()
                    page_texts.append(" ".join(w["text"] for w in words))
        except Exception as exc:
            raise ExtractionFailed(f"Failed to extract text from PDF: {exc}") from exc

        warnings: list[str] = []
        if not any(p.strip() for p in page_texts):
            warnings.append("PDF contains no extractable text (may be scanned/image-only)")

        return LoadResult(page_texts=page_texts, warnings=warnings)

    @staticmethod
    def _load_docx(data: bytes) -> LoadResult:
        from docx import Document

        try:
            doc = Document(io.BytesIO(data))
        except Exception as exc:
            raise ExtractionFailed(f"Failed to extract text from DOCX: {exc}") from exc

        text = "\n".join(p.text for p in doc.paragraphs)
        return LoadResult(page_texts=[text])
