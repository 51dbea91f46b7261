"""Tests for the chat pipeline and prompt building — fully mocked, no network."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from docchat.chunking.schemas import ChunkMetadata
from docchat.embeddings.base import EmbeddingProvider
from docchat.embeddings.embedder import Embedder
from docchat.exceptions import ChatProviderError, VectorStoreError
from docchat.llm.base import LLMProvider
from docchat.llm.schemas import ChatMessage
from docchat.pipeline.chat import ChatPipeline
from docchat.pipeline.prompts import (
    FALLBACK_ANSWER,
    GROUNDED_FILE_PROMPT,
    NO_GROUNDING_FILE_PROMPT,
    NO_GROUNDING_FOLDER_PROMPT,
    build_system_prompt,
    format_context,
)
from docchat.pipeline.schemas import GroundingStatus
from docchat.retrieval.retriever import Retriever
from docchat.retrieval.schemas import RetrievalScope
from docchat.vectorstore.base import VectorStore
from docchat.vectorstore.schemas import MetadataFilter, SearchResult

DIM = 4

# ---------------------------------------------------------------------------
# Mock providers
# ---------------------------------------------------------------------------


class FixedEmbedder(EmbeddingProvider):
    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        return [[1.0, 0.0, 0.0, 0.0] for _ in texts]

    @property
    def dimension(self) -> int:
        return DIM


class CannedStore(VectorStore):
    """Returns canned (text, score) hits per fileId."""

    def __init__(self, hits: dict[str, list[tuple[str, float]]], failing: set[str] | None = None):
        self.hits = hits
        self.failing = failing or set()
        self.filters: list[MetadataFilter] = []

    async def query(self, query_embedding, metadata_filter, top_k=3, include_metadata=True):
        self.filters.append(metadata_filter)
        if metadata_filter.file_id in self.failing:
            raise VectorStoreError("timeout")
        return [
            SearchResult(
                id=f"{metadata_filter.file_id}-1-{i}",
                text=text,
                score=score,
                metadata=ChunkMetadata(file_id=metadata_filter.file_id or "", chunk_index=i),
            )
            for i, (text, score) in enumerate(self.hits.get(metadata_filter.file_id, []))
        ][:top_k]

    async def upsert(self, records):
        return len(records)

    async def delete(self, ids):
        return 0

    async def delete_where(self, metadata_filter):
        pass

    async def count(self):
        return 0

    async def clear(self):
        pass


class MockLLM(LLMProvider):
    def __init__(self, reply: str = "It says the budget was approved."):
        self.model = "mock-llm"
        self.reply = reply
        self.received: list[list[ChatMessage]] = []

    async def chat(self, messages: list[ChatMessage]) -> str:
        self.received.append(messages)
        return self.reply


def _pipeline(store: VectorStore, llm: LLMProvider | None = None, **kwargs) -> ChatPipeline:
    return ChatPipeline(Retriever(Embedder(FixedEmbedder()), store, **kwargs), llm or MockLLM())


QUESTION = [ChatMessage("user", "What does the file say about the budget?")]

# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


class TestPrompts:
    def test_format_context(self):
        assert format_context(["alpha", "beta"]) == "[Context 1]: alpha\n\n[Context 2]: beta"

    def test_grounded_file_prompt(self):
        prompt = build_system_prompt(["alpha"], folder=False)
        assert prompt.startswith("You are an assistant helping with a PDF document.")
        assert "[Context 1]: alpha" in prompt
        assert prompt.endswith("reference the information when possible.")

    def test_grounded_folder_prompt(self):
        prompt = build_system_prompt(["alpha"], folder=True)
        assert "multiple PDF documents in a folder" in prompt

    def test_no_grounding_prompts(self):
        assert build_system_prompt([], folder=False) == NO_GROUNDING_FILE_PROMPT
        assert build_system_prompt([], folder=True) == NO_GROUNDING_FOLDER_PROMPT
        assert "wasn't able to find specific information" in NO_GROUNDING_FILE_PROMPT

    def test_template_has_single_placeholder(self):
        assert GROUNDED_FILE_PROMPT.count("{context}") == 1


# ---------------------------------------------------------------------------
# Chat pipeline
# ---------------------------------------------------------------------------


class TestChatPipeline:
    async def test_grounded_file_chat(self):
        store = CannedStore({"F": [("c1 text", 0.92), ("c2 text", 0.88), ("c3 text", 0.80)]})
        llm = MockLLM()

        response = await _pipeline(store, llm).chat(QUESTION, RetrievalScope.for_file("F"), "U1")

        assert store.filters == [MetadataFilter(user_id="U1", file_id="F")]
        assert response.grounding is GroundingStatus.GROUNDED
        assert response.is_grounded
        assert [c.text for c in response.context] == ["c1 text", "c2 text", "c3 text"]
        assert (
            "[Context 1]: c1 text\n\n[Context 2]: c2 text\n\n[Context 3]: c3 text"
            in response.system_prompt
        )
        assert response.answer == "It says the budget was approved."
        assert response.model == "mock-llm"

        sent = llm.received[0]
        assert sent[0] == ChatMessage("system", response.system_prompt)
        assert sent[1:] == QUESTION

    async def test_history_preserved(self):
        history = [
            ChatMessage("user", "Hi"),
            ChatMessage("assistant", "Hello, ask me about the file."),
            ChatMessage("user", "Summarize page two."),
        ]
        store = CannedStore({"F": [("page two", 0.7)]})
        llm = MockLLM()
        await _pipeline(store, llm).chat(history, RetrievalScope.for_file("F"), "U1")
        assert llm.received[0][1:] == history

    async def test_latest_user_message_is_the_query(self):
        seen: list[str] = []

        class Recording(FixedEmbedder):
            async def embed_texts(self, texts):
                seen.extend(texts)
                return await super().embed_texts(texts)

        history = [ChatMessage("user", "old"), ChatMessage("assistant", "a"), ChatMessage("user", "new")]
        pipeline = ChatPipeline(
            Retriever(Embedder(Recording()), CannedStore({})), MockLLM(),
        )
        await pipeline.chat(history, RetrievalScope.for_file("F"), "U1")
        assert seen == ["new"]

    async def test_folder_aggregation_with_partial_hits(self):
        store = CannedStore({"A": [("a1", 0.9), ("a2", 0.8)], "C": [("c1", 0.7)]})
        scope = RetrievalScope.for_folder("D", ["A", "B", "C"])

        response = await _pipeline(store).chat(QUESTION, scope, "U1")

        assert [c.text for c in response.context] == ["a1", "a2", "c1"]
        assert response.files_searched == 3
        assert response.files_with_hits == 2
        assert "multiple PDF documents in a folder" in response.system_prompt

    async def test_no_grounding_fallback(self):
        llm = MockLLM()
        response = await _pipeline(CannedStore({}), llm).chat(
            QUESTION, RetrievalScope.for_file("F"), "U1",
        )

        assert response.grounding is GroundingStatus.NO_GROUNDING_FOUND
        assert response.system_prompt == NO_GROUNDING_FILE_PROMPT
        assert response.context == []
        assert len(llm.received) == 1

    async def test_per_file_error_swallowed(self):
        store = CannedStore({"A": [("a1", 0.9)], "B": [("b1", 0.8)]}, failing={"A"})
        response = await _pipeline(store).chat(
            QUESTION, RetrievalScope.for_folder("D", ["A", "B"]), "U1",
        )
        assert [c.text for c in response.context] == ["b1"]
        assert response.is_grounded

    async def test_all_files_fail_gives_no_grounding(self):
        store = CannedStore({"A": [("a1", 0.9)]}, failing={"A"})
        response = await _pipeline(store).chat(
            QUESTION, RetrievalScope.for_folder("D", ["A"]), "U1",
        )
        assert response.grounding is GroundingStatus.NO_GROUNDING_FOUND
        assert response.system_prompt == NO_GROUNDING_FOLDER_PROMPT

    async def test_chat_provider_error_surfaces(self):
        llm = MockLLM()
        llm.chat = AsyncMock(side_effect=ChatProviderError("rate limited"))  # type: ignore[method-assign]
        with pytest.raises(ChatProviderError):
            await _pipeline(CannedStore({"F": [("x", 0.5)]}), llm).chat(
                QUESTION, RetrievalScope.for_file("F"), "U1",
            )

    @pytest.mark.parametrize("reply", ["", "   "])
    async def test_empty_reply_uses_fallback(self, reply: str):
        response = await _pipeline(CannedStore({}), MockLLM(reply)).chat(
            QUESTION, RetrievalScope.for_file("F"), "U1",
        )
        assert response.answer == FALLBACK_ANSWER

    async def test_no_user_message_skips_retrieval(self):
        store = CannedStore({"F": [("x", 0.5)]})
        llm = MockLLM()
        response = await _pipeline(store, llm).chat(
            [ChatMessage("assistant", "How can I help?")], RetrievalScope.for_file("F"), "U1",
        )
        assert store.filters == []
        assert response.grounding is GroundingStatus.SKIPPED
        assert response.system_prompt == NO_GROUNDING_FILE_PROMPT
        assert len(llm.received) == 1

    async def test_unscoped_chat_fails_closed(self):
        store = CannedStore({None: [("someone's text", 0.9)]})  # type: ignore[dict-item]
        response = await _pipeline(store).chat(QUESTION, RetrievalScope(), "U1")
        assert store.filters == []
        assert response.grounding is GroundingStatus.NO_GROUNDING_FOUND

    async def test_cross_user_isolation_with_faiss(self):
        pytest.importorskip("faiss")
        from docchat.vectorstore.faiss_store import FAISSStore
        from docchat.vectorstore.schemas import VectorRecord

        faiss_store = FAISSStore(dimension=DIM)
        await faiss_store.upsert([
            VectorRecord(
                id="F-1-0", text="owner text", embedding=[1.0, 0.0, 0.0, 0.0],
                metadata=ChunkMetadata(file_id="F", user_id="U1"),
            ),
            VectorRecord(
                id="G-1-0", text="other user text", embedding=[1.0, 0.0, 0.0, 0.0],
                metadata=ChunkMetadata(file_id="F", user_id="U2"),
            ),
        ])

        response = await _pipeline(faiss_store).chat(QUESTION, RetrievalScope.for_file("F"), "U2")
        assert [c.text for c in response.context] == ["other user text"]
