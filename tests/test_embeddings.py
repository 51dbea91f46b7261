"""Tests for embedding providers and the Embedder — mocked, no network calls."""

from __future__ import annotations

import hashlib
import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from docchat.embeddings.base import EmbeddingProvider
from docchat.embeddings.embedder import Embedder
from docchat.embeddings.factory import available_providers, get_embedding_provider
from docchat.embeddings.ollama_provider import OllamaEmbeddingProvider
from docchat.exceptions import DimensionMismatch, EmbeddingProviderError

# ---------------------------------------------------------------------------
# Mock embedding provider for testing
# ---------------------------------------------------------------------------


class MockEmbeddingProvider(EmbeddingProvider):
    """A deterministic embedding provider for tests."""

    def __init__(self, dimension: int = 16, returned_dimension: int | None = None):
        self._dim = dimension
        self._returned = returned_dimension or dimension
        self.calls: list[list[str]] = []

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self._hash_embed(t) for t in texts]

    @property
    def dimension(self) -> int:
        return self._dim

    def _hash_embed(self, text: str) -> list[float]:
        h = hashlib.sha256(text.encode()).digest()
        return [(h[i % len(h)] / 255.0) * 2 - 1 for i in range(self._returned)]


# ---------------------------------------------------------------------------
# Base class tests
# ---------------------------------------------------------------------------


class TestEmbeddingProviderABC:
    def test_cannot_instantiate_base(self):
        with pytest.raises(TypeError):
            EmbeddingProvider()  # type: ignore[abstract]

    def test_provider_name(self):
        assert MockEmbeddingProvider.provider_name() == "MockEmbeddingProvider"

    async def test_default_embed_query(self):
        provider = MockEmbeddingProvider()
        vec = await provider.embed_query("what is due?")
        assert vec == (await provider.embed_texts(["what is due?"]))[0]


# ---------------------------------------------------------------------------
# Embedder
# ---------------------------------------------------------------------------


class TestEmbedder:
    async def test_embed_returns_configured_dimension(self):
        embedder = Embedder(MockEmbeddingProvider(dimension=16))
        vec = await embedder.embed("some chunk")
        assert len(vec) == 16
        assert all(isinstance(x, float) for x in vec)

    async def test_deterministic(self):
        embedder = Embedder(MockEmbeddingProvider())
        assert await embedder.embed("same") == await embedder.embed("same")

    @pytest.mark.parametrize("text", ["", "   ", "\n"])
    async def test_blank_text_rejected(self, text: str):
        provider = MockEmbeddingProvider()
        with pytest.raises(ValueError):
            await Embedder(provider).embed(text)
        assert provider.calls == []

    async def test_dimension_mismatch_is_fatal(self):
        embedder = Embedder(MockEmbeddingProvider(dimension=16, returned_dimension=8))
        with pytest.raises(DimensionMismatch) as exc_info:
            await embedder.embed("chunk")
        assert exc_info.value.expected == 16
        assert exc_info.value.actual == 8

    async def test_explicit_dimension_overrides_provider(self):
        embedder = Embedder(MockEmbeddingProvider(dimension=16), dimension=32)
        with pytest.raises(DimensionMismatch):
            await embedder.embed_query("question")

    async def test_wrong_vector_count(self):
        provider = MockEmbeddingProvider()
        provider.embed_texts = AsyncMock(return_value=[])  # type: ignore[method-assign]
        with pytest.raises(EmbeddingProviderError):
            await Embedder(provider).embed("chunk")


# ---------------------------------------------------------------------------
# Ollama provider (httpx.MockTransport)
# ---------------------------------------------------------------------------


class TestOllamaProvider:
    async def test_embed_texts(self):
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            seen.append(body)
            assert request.url.path == "/api/embed"
            return httpx.Response(
                200, json={"embeddings": [[0.1, 0.2, 0.3] for _ in body["input"]]}
            )

        provider = OllamaEmbeddingProvider(
            model="nomic-embed-text", dimension=3, transport=httpx.MockTransport(handler),
        )
        vecs = await provider.embed_texts(["x", "y"])
        await provider.aclose()

        assert vecs == [[0.1, 0.2, 0.3], [0.1, 0.2, 0.3]]
        assert seen == [{"model": "nomic-embed-text", "input": ["x", "y"]}]

    async def test_non_2xx_raises(self):
        provider = OllamaEmbeddingProvider(
            transport=httpx.MockTransport(lambda r: httpx.Response(500, text="boom")),
        )
        with pytest.raises(EmbeddingProviderError):
            await provider.embed_texts(["x"])

    async def test_malformed_response(self):
        provider = OllamaEmbeddingProvider(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"oops": 1})),
        )
        with pytest.raises(EmbeddingProviderError, match="Malformed"):
            await provider.embed_texts(["x"])

    async def test_empty_input_no_request(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        provider = OllamaEmbeddingProvider(transport=httpx.MockTransport(handler))
        assert await provider.embed_texts([]) == []


# ---------------------------------------------------------------------------
# OpenAI provider (client patched)
# ---------------------------------------------------------------------------


class TestOpenAIProvider:
    @pytest.fixture
    def provider(self):
        pytest.importorskip("openai")
        from docchat.embeddings.openai_provider import OpenAIEmbeddingProvider

        return OpenAIEmbeddingProvider(api_key="sk-test")

    def test_defaults(self, provider):
        assert provider.model == "text-embedding-ada-002"
        assert provider.dimension == 1536

    def test_azure_client(self):
        openai = pytest.importorskip("openai")
        from docchat.embeddings.openai_provider import OpenAIEmbeddingProvider

        provider = OpenAIEmbeddingProvider(
            model="ada-deployment",
            api_key="az-test",
            azure_endpoint="https://example.openai.azure.com",
        )
        assert isinstance(provider._client, openai.AsyncAzureOpenAI)

    async def test_embed_texts_sorted_by_index(self, provider):
        data = [MagicMock(index=1, embedding=[0.2]), MagicMock(index=0, embedding=[0.1])]
        provider._client.embeddings.create = AsyncMock(return_value=MagicMock(data=data))

        assert await provider.embed_texts(["a", "b"]) == [[0.1], [0.2]]
        provider._client.embeddings.create.assert_awaited_once_with(
            model="text-embedding-ada-002", input=["a", "b"],
        )

    async def test_sdk_error_wrapped(self, provider):
        import openai

        provider._client.embeddings.create = AsyncMock(
            side_effect=openai.APIConnectionError(
                request=httpx.Request("POST", "https://api.openai.com/v1/embeddings"),
            )
        )
        with pytest.raises(EmbeddingProviderError):
            await provider.embed_query("hello")


# ---------------------------------------------------------------------------
# Factory tests
# ---------------------------------------------------------------------------


class TestEmbeddingFactory:
    def test_available_providers(self):
        assert available_providers() == ["openai", "ollama", "huggingface"]

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError, match="Unknown embedding provider"):
            get_embedding_provider("nonexistent")

    def test_returns_fresh_instances(self):
        with patch("docchat.embeddings.factory.importlib") as mock_importlib:
            mock_mod = MagicMock()
            mock_mod.OllamaEmbeddingProvider = MockEmbeddingProvider
            mock_importlib.import_module.return_value = mock_mod

            p1 = get_embedding_provider("ollama")
            p2 = get_embedding_provider("ollama")
            assert p1 is not p2

    def test_none_kwargs_dropped(self):
        with patch("docchat.embeddings.factory.importlib") as mock_importlib:
            mock_mod = MagicMock()
            mock_mod.OllamaEmbeddingProvider = MockEmbeddingProvider
            mock_importlib.import_module.return_value = mock_mod

            provider = get_embedding_provider("ollama", dimension=None)
            assert provider.dimension == 16

    def test_ollama_via_factory(self):
        provider = get_embedding_provider("ollama", dimension=384)
        assert isinstance(provider, OllamaEmbeddingProvider)
        assert provider.dimension == 384
