"""End-to-end pipelines — ingest, chat, prompts."""

from docchat.pipeline.chat import ChatPipeline
from docchat.pipeline.ingest import IngestPipeline
from docchat.pipeline.schemas import ChatResponse, GroundingStatus, IngestResult

__all__ = [
    "ChatPipeline",
    "ChatResponse",
    "GroundingStatus",
    "IngestPipeline",
    "IngestResult",
]
