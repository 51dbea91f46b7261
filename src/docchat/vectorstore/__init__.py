"""Vector store backends — FAISS (local), Qdrant and Pinecone (hosted)."""

from docchat.vectorstore.base import UPSERT_BATCH_SIZE, VectorStore
from docchat.vectorstore.factory import available_stores, get_vector_store
from docchat.vectorstore.schemas import MetadataFilter, SearchResult, VectorRecord

__all__ = [
    "MetadataFilter",
    "SearchResult",
    "UPSERT_BATCH_SIZE",
    "VectorRecord",
    "VectorStore",
    "available_stores",
    "get_vector_store",
]
