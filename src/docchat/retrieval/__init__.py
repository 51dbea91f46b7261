"""Retrieval — scoped, owner-filtered similarity search."""

from docchat.retrieval.retriever import Retriever
from docchat.retrieval.schemas import RetrievalResult, RetrievalScope

__all__ = ["RetrievalResult", "RetrievalScope", "Retriever"]
