"""Qdrant vector store — production-grade with native metadata filtering.

Requires the ``qdrant`` extra. Supports Qdrant Cloud, a local on-disk
database, and an in-memory instance for testing. Qdrant point ids must be
UUIDs or integers, so chunk ids are mapped to UUIDv5 and the chunk id
is kept in the payload.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable
from typing import Any, TypeVar

from docchat.chunking.schemas import ChunkMetadata
from docchat.exceptions import VectorStoreError
from docchat.vectorstore.base import UPSERT_BATCH_SIZE, VectorStore
from docchat.vectorstore.schemas import MetadataFilter, SearchResult, VectorRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CHUNK_ID_KEY = "chunkId"


def point_id(chunk_id: str) -> str:
    """Stable Qdrant point id for a chunk id."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, chunk_id))


class QdrantStore(VectorStore):
    """Qdrant-backed vector store."""

    def __init__(
        self,
        collection_name: str = "pdf-chatter",
        dimension: int = 1536,
        url: str | None = None,
        api_key: str | None = None,
        path: str | None = None,
    ):
        try:
            from qdrant_client import AsyncQdrantClient, models
            from qdrant_client.http.exceptions import (
                ResponseHandlingException,
                UnexpectedResponse,
            )
        except ImportError as exc:
            raise ImportError(
                "qdrant-client required: pip install document-chat-rag[qdrant]"
            ) from exc

        self._models = models
        self._errors = (UnexpectedResponse, ResponseHandlingException)
        self._collection_name = collection_name
        self._dimension = dimension
        self._ready = False

        if url:
            self._client = AsyncQdrantClient(url=url, api_key=api_key)
        elif path:
            self._client = AsyncQdrantClient(path=path)
        else:
            # In-memory for testing
            self._client = AsyncQdrantClient(location=":memory:")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def upsert(self, records: list[VectorRecord]) -> int:
        if not records:
            return 0
        await self._ensure_collection()

        points = []
        for record in records:
            payload = record.payload()
            payload[_CHUNK_ID_KEY] = record.id
            points.append(self._models.PointStruct(
                id=point_id(record.id),
                vector=record.embedding,
                payload=payload,
            ))

        for i in range(0, len(points), UPSERT_BATCH_SIZE):
            await self._run("upsert", self._client.upsert(
                collection_name=self._collection_name,
                points=points[i : i + UPSERT_BATCH_SIZE],
            ))

        logger.info("QdrantStore upserted %d records", len(records))
        return len(records)

    async def query(
        self,
        query_embedding: list[float],
        metadata_filter: MetadataFilter,
        top_k: int = 3,
        include_metadata: bool = True,
    ) -> list[SearchResult]:
        await self._ensure_collection()

        response = await self._run("query", self._client.query_points(
            collection_name=self._collection_name,
            query=query_embedding,
            limit=top_k,
            query_filter=self._to_filter(metadata_filter),
            with_payload=include_metadata,
        ))

        results: list[SearchResult] = []
        for point in response.points:
            payload = point.payload or {}
            results.append(SearchResult(
                id=payload.get(_CHUNK_ID_KEY, str(point.id)),
                text=payload.get("text", ""),
                score=point.score if point.score is not None else 0.0,
                metadata=ChunkMetadata.from_payload(payload) if payload else ChunkMetadata(),
            ))

        return results

    async def delete(self, ids: list[str]) -> int:
        if not ids:
            return 0
        await self._ensure_collection()
        await self._run("delete", self._client.delete(
            collection_name=self._collection_name,
            points_selector=self._models.PointIdsList(points=[point_id(i) for i in ids]),
        ))
        return len(ids)

    async def delete_where(self, metadata_filter: MetadataFilter) -> None:
        await self._ensure_collection()
        await self._run("delete", self._client.delete(
            collection_name=self._collection_name,
            points_selector=self._models.FilterSelector(
                filter=self._to_filter(metadata_filter),
            ),
        ))

    async def count(self) -> int:
        await self._ensure_collection()
        result = await self._run("count", self._client.count(
            collection_name=self._collection_name,
            exact=True,
        ))
        return result.count

    async def clear(self) -> None:
        await self._run("clear", self._client.delete_collection(self._collection_name))
        self._ready = False
        await self._ensure_collection()

    async def aclose(self) -> None:
        await self._client.close()

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    async def _ensure_collection(self) -> None:
        if self._ready:
            return
        exists = await self._run(
            "collection check", self._client.collection_exists(self._collection_name)
        )
        if not exists:
            await self._run("create collection", self._client.create_collection(
                collection_name=self._collection_name,
                vectors_config=self._models.VectorParams(
                    size=self._dimension,
                    distance=self._models.Distance.COSINE,
                ),
            ))
            logger.info(
                "Created Qdrant collection '%s' (dim=%d)",
                self._collection_name, self._dimension,
            )
        self._ready = True

    def _to_filter(self, metadata_filter: MetadataFilter) -> Any:
        return self._models.Filter(must=[
            self._models.FieldCondition(
                key=key,
                match=self._models.MatchValue(value=value),
            )
            for key, value in metadata_filter.to_dict().items()
        ])

    async def _run(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except self._errors as exc:
            raise VectorStoreError(
                f"Qdrant {operation} failed: {exc}",
                {"collection": self._collection_name},
            ) from exc
