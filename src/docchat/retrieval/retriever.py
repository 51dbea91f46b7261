"""Retriever — embed the question once, search each target file."""

from __future__ import annotations

import asyncio
import logging

from docchat.embeddings.embedder import Embedder
from docchat.exceptions import DimensionMismatch, ProviderError
from docchat.retrieval.schemas import RetrievalResult, RetrievalScope
from docchat.vectorstore.base import VectorStore
from docchat.vectorstore.schemas import MetadataFilter, SearchResult

logger = logging.getLogger(__name__)


class Retriever:
    """Orchestrates query embedding → per-file filtered search.

    A failure for one target file is logged and skipped so that the other
    files of a folder can still ground the answer.
    """

    def __init__(
        self,
        embedder: Embedder,
        vector_store: VectorStore,
        top_k: int = 3,
        allow_unscoped: bool = False,
        max_concurrency: int = 1,
    ):
        self.embedder = embedder
        self.vector_store = vector_store
        self.top_k = top_k
        self.allow_unscoped = allow_unscoped
        self.max_concurrency = max(1, max_concurrency)

    async def retrieve(
        self,
        query: str,
        scope: RetrievalScope,
        user_id: str | None,
        top_k: int | None = None,
    ) -> RetrievalResult:
        """Run retrieval for one chat turn.

        Args:
            query: The latest user message.
            scope: File or folder the answer may draw on.
            user_id: Owner of the documents; ``None`` is treated as ``""``.
            top_k: Matches per target file (defaults to ``self.top_k``).

        Returns:
            A ``RetrievalResult`` whose matches are concatenated in target
            order, each target's matches highest score first.
        """
        k = self.top_k if top_k is None else top_k
        user_id = user_id or ""
        filters = self._target_filters(scope, user_id)
        result = RetrievalResult(query=query)

        if not filters:
            logger.warning("Retrieval skipped: no target files for scope %s", scope)
            return result

        try:
            query_embedding = await self.embedder.embed_query(query)
        except (ProviderError, DimensionMismatch, ValueError) as exc:
            logger.warning("Query embedding failed, continuing without context: %s", exc)
            result.failed_files = [label for label, _ in filters]
            return result

        if self.max_concurrency == 1:
            outcomes = [
                await self._search_one(label, mf, query_embedding, k)
                for label, mf in filters
            ]
        else:
            semaphore = asyncio.Semaphore(self.max_concurrency)

            async def bounded(label: str, mf: MetadataFilter):
                async with semaphore:
                    return await self._search_one(label, mf, query_embedding, k)

            # gather preserves argument order
            outcomes = await asyncio.gather(*(bounded(label, mf) for label, mf in filters))

        for label, matches in outcomes:
            result.files_searched += 1
            if matches is None:
                result.failed_files.append(label)
                continue
            if matches:
                result.files_with_hits += 1
                result.matches.extend(matches)

        logger.info(
            "Retrieved %d matches from %d/%d files (%d failed)",
            len(result.matches),
            result.files_with_hits,
            result.files_searched,
            len(result.failed_files),
        )
        return result

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _target_filters(
        self, scope: RetrievalScope, user_id: str
    ) -> list[tuple[str, MetadataFilter]]:
        if scope.is_folder:
            # Folder filter is narrowed to each member fileId so hits are attributed per file
            return [
                (
                    file_id,
                    MetadataFilter(user_id=user_id, file_id=file_id, folder_id=scope.folder_id),
                )
                for file_id in scope.member_file_ids
            ]
        if scope.file_id:
            return [(scope.file_id, MetadataFilter.for_scope(user_id, file_id=scope.file_id))]
        if self.allow_unscoped:
            return [("*", MetadataFilter.for_scope(user_id))]
        return []

    async def _search_one(
        self,
        label: str,
        metadata_filter: MetadataFilter,
        query_embedding: list[float],
        top_k: int,
    ) -> tuple[str, list[SearchResult] | None]:
        try:
            matches = await self.vector_store.query(
                query_embedding,
                metadata_filter,
                top_k=top_k,
                include_metadata=True,
            )
        except (ProviderError, DimensionMismatch) as exc:
            logger.warning("Search failed for file %s: %s", label, exc)
            return label, None

        logger.debug("File %s: %d matches", label, len(matches))
        return label, sorted(matches, key=lambda m: m.score, reverse=True)
