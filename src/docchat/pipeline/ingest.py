"""Ingestion pipeline — bytes → extract → chunk → embed → store.

This is the main entry point for adding documents to the vector store.
Chunks are embedded one at a time and written in batches of
``batch_size``; a failure aborts the remaining batches and propagates
(batches already written stay in the index).
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from pathlib import Path

from docchat.chunking.base import BaseChunker
from docchat.chunking.factory import get_chunker
from docchat.chunking.schemas import ChunkMetadata
from docchat.documents.loader import DocumentLoader, resolve_file_type
from docchat.documents.schemas import LoadResult
from docchat.embeddings.embedder import Embedder
from docchat.exceptions import NoTextContent
from docchat.pipeline.schemas import IngestResult
from docchat.vectorstore.base import UPSERT_BATCH_SIZE, VectorStore
from docchat.vectorstore.schemas import MetadataFilter, VectorRecord

logger = logging.getLogger(__name__)


class IngestPipeline:
    """Orchestrates document ingestion: extract → chunk → embed → store."""

    def __init__(
        self,
        embedder: Embedder,
        vector_store: VectorStore,
        loader: DocumentLoader | None = None,
        chunker: BaseChunker | None = None,
        batch_size: int = UPSERT_BATCH_SIZE,
        max_stored_chars: int = 1000,
        replace_existing: bool = True,
    ):
        if not 1 <= batch_size <= UPSERT_BATCH_SIZE:
            raise ValueError(
                f"batch_size must be between 1 and {UPSERT_BATCH_SIZE}, got {batch_size}"
            )
        self.embedder = embedder
        self.vector_store = vector_store
        self.loader = loader or DocumentLoader()
        self.chunker = chunker or get_chunker("recursive")
        self.batch_size = batch_size
        self.max_stored_chars = max_stored_chars
        self.replace_existing = replace_existing
        self._tasks: set[asyncio.Task[IngestResult]] = set()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest_bytes(
        self,
        data: bytes,
        filename: str,
        file_id: str,
        user_id: str | None = None,
        folder_id: str | None = None,
    ) -> IngestResult:
        """Ingest an uploaded document.

        Args:
            data: Raw file bytes.
            filename: Original filename; its extension selects the parser.
            file_id: Identifier of the document; namespaces chunk ids.
            user_id: Owner. ``None`` is stored as ``""``.
            folder_id: Folder the document belongs to, if any.

        Returns:
            An ``IngestResult`` with counts and warnings.

        Raises:
            UnsupportedFileType: before any extraction or embedding.
            ExtractionFailed, NoTextContent, DocumentTooLarge: bad input.
            DimensionMismatch, ProviderError: embedding or store failure.
        """
        self._require_file_id(file_id)
        resolve_file_type(filename, self.loader.supported)

        result = await asyncio.to_thread(self.loader.load_bytes, data, filename)
        return await self._ingest_loaded(result, file_id, user_id, folder_id)

    async def ingest_file(
        self,
        path: str | Path,
        file_id: str,
        user_id: str | None = None,
        folder_id: str | None = None,
    ) -> IngestResult:
        """Ingest a document from disk. See ``ingest_bytes``."""
        path = Path(path)
        self._require_file_id(file_id)
        resolve_file_type(path.name, self.loader.supported)

        result = await asyncio.to_thread(self.loader.load_file, path)
        return await self._ingest_loaded(result, file_id, user_id, folder_id)

    def submit(
        self,
        data: bytes,
        filename: str,
        file_id: str,
        user_id: str | None = None,
        folder_id: str | None = None,
    ) -> asyncio.Task[IngestResult]:
        """Start ingestion in the background and return its task.

        The caller may await the task or drop it; failures are logged
        either way. Must be called from a running event loop.
        """
        task = asyncio.create_task(
            self.ingest_bytes(data, filename, file_id, user_id, folder_id),
            name=f"ingest:{file_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    @property
    def pending(self) -> int:
        """Number of background ingestions still running."""
        return len(self._tasks)

    async def delete_document(self, file_id: str, user_id: str | None = None) -> None:
        """Remove every chunk of a document from the index."""
        self._require_file_id(file_id)
        await self.vector_store.delete_where(
            MetadataFilter(user_id=user_id or "", file_id=file_id)
        )
        logger.info("Deleted chunks for file %s", file_id)

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    async def _ingest_loaded(
        self,
        loaded: LoadResult,
        file_id: str,
        user_id: str | None,
        folder_id: str | None,
    ) -> IngestResult:
        source = loaded.source or file_id
        if not loaded.has_text():
            raise NoTextContent(
                "Document contains no extractable text",
                {"file_id": file_id, "pages": loaded.page_count},
            )

        base_meta = ChunkMetadata(
            file_id=file_id,
            user_id=user_id or "",
            folder_id=folder_id.strip() if folder_id and folder_id.strip() else None,
        )

        # Chunk every non-blank page; page numbers follow extraction order
        chunks = []
        for page_no, page_text in enumerate(loaded.page_texts, 1):
            if not page_text.strip():
                continue
            page_meta = dataclasses.replace(base_meta, page=page_no)
            chunks.extend(self.chunker.chunk(page_text, metadata=page_meta))

        ingest = IngestResult(
            file_id=file_id,
            source=source,
            pages=loaded.page_count,
            chunks_created=len(chunks),
            warnings=list(loaded.warnings),
        )
        if not chunks:
            ingest.warnings.append("Chunker produced zero chunks")
            return ingest

        if self.replace_existing:
            await self.vector_store.delete_where(
                MetadataFilter(user_id=base_meta.user_id, file_id=file_id)
            )

        batch: list[VectorRecord] = []
        for chunk in chunks:
            embedding = await self.embedder.embed(chunk.text)
            batch.append(VectorRecord(
                id=chunk.id,
                text=chunk.text[: self.max_stored_chars],
                embedding=embedding,
                metadata=chunk.metadata,
            ))
            if len(batch) >= self.batch_size:
                ingest.chunks_stored += await self.vector_store.upsert(batch)
                ingest.batches += 1
                batch = []

        if batch:
            ingest.chunks_stored += await self.vector_store.upsert(batch)
            ingest.batches += 1

        logger.info(
            "Ingested %s as %s: %d pages → %d chunks → %d stored in %d batches",
            source,
            file_id,
            ingest.pages,
            ingest.chunks_created,
            ingest.chunks_stored,
            ingest.batches,
        )
        return ingest

    def _on_task_done(self, task: asyncio.Task[IngestResult]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Ingestion task %s was cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Ingestion task %s failed: %s", task.get_name(), exc, exc_info=exc
            )

    @staticmethod
    def _require_file_id(file_id: str) -> None:
        if not file_id or not file_id.strip():
            raise ValueError("file_id is required")
