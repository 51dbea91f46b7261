"""Pinecone vector store over the data-plane REST API.

Talks to an index host (``https://<index>-<project>.svc.<env>.pinecone.io``)
with httpx. Metadata filters use Pinecone's ``$eq`` / ``$and`` language and
upserts are sent in batches of ``UPSERT_BATCH_SIZE``.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from docchat.chunking.schemas import ChunkMetadata
from docchat.exceptions import VectorStoreError
from docchat.vectorstore.base import UPSERT_BATCH_SIZE, VectorStore
from docchat.vectorstore.schemas import MetadataFilter, SearchResult, VectorRecord

logger = logging.getLogger(__name__)

API_VERSION = "2024-07"
DELETE_BATCH_SIZE = 1000


class PineconeStore(VectorStore):
    """Pinecone-backed vector store."""

    def __init__(
        self,
        index_host: str | None = None,
        api_key: str | None = None,
        namespace: str = "",
        dimension: int = 1536,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        host = index_host or os.getenv("PINECONE_INDEX_HOST")
        if not host:
            raise ValueError("Pinecone index host is required (url or PINECONE_INDEX_HOST)")
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"

        self._namespace = namespace
        self._dimension = dimension
        self._client = httpx.AsyncClient(
            base_url=host,
            headers={
                "Api-Key": api_key or os.getenv("PINECONE_API_KEY", ""),
                "X-Pinecone-API-Version": API_VERSION,
            },
            timeout=timeout,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def upsert(self, records: list[VectorRecord]) -> int:
        if not records:
            return 0

        for i in range(0, len(records), UPSERT_BATCH_SIZE):
            batch = records[i : i + UPSERT_BATCH_SIZE]
            await self._post("/vectors/upsert", {
                "vectors": [
                    {"id": r.id, "values": r.embedding, "metadata": r.payload()}
                    for r in batch
                ],
                "namespace": self._namespace,
            })

        logger.info("PineconeStore upserted %d records", len(records))
        return len(records)

    async def query(
        self,
        query_embedding: list[float],
        metadata_filter: MetadataFilter,
        top_k: int = 3,
        include_metadata: bool = True,
    ) -> list[SearchResult]:
        data = await self._post("/query", {
            "vector": query_embedding,
            "topK": top_k,
            "filter": metadata_filter.to_pinecone(),
            "includeMetadata": include_metadata,
            "includeValues": False,
            "namespace": self._namespace,
        })

        results: list[SearchResult] = []
        try:
            for match in data.get("matches") or []:
                metadata = match.get("metadata") or {}
                results.append(SearchResult(
                    id=match["id"],
                    text=self._text_from_metadata(metadata.get("text")),
                    score=float(match.get("score") or 0.0),
                    metadata=ChunkMetadata.from_payload(metadata) if metadata else ChunkMetadata(),
                ))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise VectorStoreError(
                "Malformed Pinecone query response",
                {"namespace": self._namespace},
            ) from exc
        return results

    async def delete(self, ids: list[str]) -> int:
        for i in range(0, len(ids), DELETE_BATCH_SIZE):
            await self._post("/vectors/delete", {
                "ids": ids[i : i + DELETE_BATCH_SIZE],
                "namespace": self._namespace,
            })
        return len(ids)

    async def delete_where(self, metadata_filter: MetadataFilter) -> None:
        await self._post("/vectors/delete", {
            "filter": metadata_filter.to_pinecone(),
            "namespace": self._namespace,
        })

    async def count(self) -> int:
        data = await self._post("/describe_index_stats", {})
        if self._namespace:
            namespaces = data.get("namespaces") or {}
            return int(namespaces.get(self._namespace, {}).get("vectorCount", 0))
        return int(data.get("totalVectorCount", 0))

    async def clear(self) -> None:
        await self._post("/vectors/delete", {
            "deleteAll": True,
            "namespace": self._namespace,
        })

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    async def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = await self._client.post(path, json=body)
            resp.raise_for_status()
            data = resp.json() if resp.content else {}
        except httpx.HTTPError as exc:
            raise VectorStoreError(
                f"Pinecone request to {path} failed: {exc}",
                {"namespace": self._namespace},
            ) from exc
        except ValueError as exc:
            raise VectorStoreError(
                f"Malformed Pinecone response from {path}",
                {"namespace": self._namespace},
            ) from exc
        if not isinstance(data, dict):
            raise VectorStoreError(
                f"Malformed Pinecone response from {path}",
                {"namespace": self._namespace},
            )
        return data

    @staticmethod
    def _text_from_metadata(value: Any) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, list):
            return " ".join(str(v) for v in value)
        return str(value or "")
