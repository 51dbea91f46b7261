"""FAISS vector store — local, zero infrastructure.

Vectors live in an ``IndexIDMap2`` over an inner-product flat index, so a
record can be replaced in place by id. Metadata is kept in a parallel dict
and applied as a post-filter.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np

from docchat.chunking.schemas import ChunkMetadata
from docchat.exceptions import DimensionMismatch
from docchat.vectorstore.base import VectorStore
from docchat.vectorstore.schemas import MetadataFilter, SearchResult, VectorRecord

logger = logging.getLogger(__name__)


class FAISSStore(VectorStore):
    """FAISS-backed vector store with metadata filtering."""

    def __init__(self, dimension: int = 1536):
        try:
            import faiss
        except ImportError as exc:
            raise ImportError(
                "faiss-cpu required: pip install document-chat-rag[faiss]"
            ) from exc

        self._faiss = faiss
        self._dimension = dimension
        self._index = self._new_index()
        self._records: dict[int, dict] = {}  # int id -> {id, text, metadata}
        self._int_ids: dict[str, int] = {}  # chunk id -> int id
        self._next_id = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def upsert(self, records: list[VectorRecord]) -> int:
        if not records:
            return 0

        # Last write wins for duplicate ids within one call
        latest: dict[str, VectorRecord] = {}
        for record in records:
            self._check_dimension(record.embedding)
            latest[record.id] = record

        stale = [self._int_ids[rid] for rid in latest if rid in self._int_ids]
        if stale:
            self._remove(stale)

        vectors = np.array([r.embedding for r in latest.values()], dtype=np.float32)
        # L2-normalize for cosine similarity via inner product
        self._faiss.normalize_L2(vectors)

        int_ids = np.arange(self._next_id, self._next_id + len(latest), dtype=np.int64)
        self._index.add_with_ids(vectors, int_ids)

        for int_id, record in zip(int_ids.tolist(), latest.values(), strict=True):
            self._int_ids[record.id] = int_id
            self._records[int_id] = {
                "id": record.id,
                "text": record.text,
                "metadata": record.metadata,
            }

        self._next_id += len(latest)
        logger.info(
            "FAISSStore upserted %d records (%d replaced, total: %d)",
            len(latest), len(stale), self._index.ntotal,
        )
        return len(latest)

    async def query(
        self,
        query_embedding: list[float],
        metadata_filter: MetadataFilter,
        top_k: int = 3,
        include_metadata: bool = True,
    ) -> list[SearchResult]:
        if self._index.ntotal == 0:
            return []
        self._check_dimension(query_embedding)

        query_vec = np.array([query_embedding], dtype=np.float32)
        self._faiss.normalize_L2(query_vec)

        # The filter is always applied after search, so rank the whole index
        scores, indices = self._index.search(query_vec, self._index.ntotal)

        results: list[SearchResult] = []
        for score, idx in zip(scores[0], indices[0], strict=True):
            if idx == -1:
                continue
            record = self._records.get(int(idx))
            if record is None or not metadata_filter.matches(record["metadata"]):
                continue

            results.append(SearchResult(
                id=record["id"],
                text=record["text"] if include_metadata else "",
                score=float(score),
                metadata=record["metadata"] if include_metadata else ChunkMetadata(),
            ))

            if len(results) >= top_k:
                break

        return results

    async def delete(self, ids: list[str]) -> int:
        int_ids = [self._int_ids[i] for i in ids if i in self._int_ids]
        if int_ids:
            self._remove(int_ids)
        return len(int_ids)

    async def delete_where(self, metadata_filter: MetadataFilter) -> None:
        int_ids = [
            int_id
            for int_id, record in self._records.items()
            if metadata_filter.matches(record["metadata"])
        ]
        if int_ids:
            self._remove(int_ids)
        logger.info("FAISSStore deleted %d records matching %s", len(int_ids), metadata_filter)

    async def count(self) -> int:
        return self._index.ntotal

    async def clear(self) -> None:
        self._index = self._new_index()
        self._records.clear()
        self._int_ids.clear()
        self._next_id = 0

    def save(self, path: str) -> None:
        """Save FAISS index and metadata to disk."""
        p = Path(path)
        p.mkdir(parents=True, exist_ok=True)

        self._faiss.write_index(self._index, str(p / "index.faiss"))

        serializable = {
            str(int_id): {
                "id": record["id"],
                "metadata": record["metadata"].to_payload(record["text"]),
            }
            for int_id, record in self._records.items()
        }
        with open(p / "metadata.json", "w", encoding="utf-8") as f:
            json.dump({"records": serializable, "next_id": self._next_id}, f)

        logger.info("FAISSStore saved to %s (%d records)", path, self._index.ntotal)

    def load(self, path: str) -> None:
        """Load FAISS index and metadata from disk."""
        p = Path(path)

        index = self._faiss.read_index(str(p / "index.faiss"))
        if index.d != self._dimension:
            raise DimensionMismatch(self._dimension, index.d)
        self._index = index

        with open(p / "metadata.json", encoding="utf-8") as f:
            data = json.load(f)

        self._records = {}
        self._int_ids = {}
        for str_id, record in data["records"].items():
            payload = record["metadata"]
            self._records[int(str_id)] = {
                "id": record["id"],
                "text": payload.get("text", ""),
                "metadata": ChunkMetadata.from_payload(payload),
            }
            self._int_ids[record["id"]] = int(str_id)

        self._next_id = data.get("next_id", len(self._records))
        logger.info("FAISSStore loaded from %s (%d records)", path, self._index.ntotal)

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _new_index(self):
        return self._faiss.IndexIDMap2(self._faiss.IndexFlatIP(self._dimension))

    def _remove(self, int_ids: list[int]) -> None:
        self._index.remove_ids(np.array(int_ids, dtype=np.int64))
        for int_id in int_ids:
            record = self._records.pop(int_id)
            self._int_ids.pop(record["id"], None)

    def _check_dimension(self, vector: list[float]) -> None:
        if len(vector) != self._dimension:
            raise DimensionMismatch(self._dimension, len(vector))
