"""OpenAI embedding provider — text-embedding-ada-002 / 3-small / 3-large.

Also serves Azure OpenAI deployments when ``azure_endpoint`` is given (the
deployment name is passed as ``model``). Requires the ``openai`` extra and
an API key via ``OPENAI_API_KEY`` / ``AZURE_OPENAI_API_KEY``.
"""

from __future__ import annotations

import logging
from typing import Any

from docchat.embeddings.base import EmbeddingProvider
from docchat.exceptions import EmbeddingProviderError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "text-embedding-ada-002"
DEFAULT_AZURE_API_VERSION = "2023-05-15"

_DIMENSION_MAP = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}

BATCH_SIZE = 2048  # OpenAI max batch size


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embed text via the OpenAI (or Azure OpenAI) Embeddings API."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        base_url: str | None = None,
        azure_endpoint: str | None = None,
        api_version: str | None = None,
        dimension: int | None = None,
    ):
        try:
            import openai
        except ImportError as exc:
            raise ImportError(
                "openai package required: pip install document-chat-rag[openai]"
            ) from exc

        self._openai = openai
        self.model = model
        self._dimension = dimension or _DIMENSION_MAP.get(model, 1536)

        if azure_endpoint:
            self._client: Any = openai.AsyncAzureOpenAI(
                api_key=api_key,
                azure_endpoint=azure_endpoint,
                api_version=api_version or DEFAULT_AZURE_API_VERSION,
            )
        else:
            kwargs: dict[str, Any] = {}
            if api_key:
                kwargs["api_key"] = api_key
            if base_url:
                kwargs["base_url"] = base_url
            self._client = openai.AsyncOpenAI(**kwargs)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        all_embeddings: list[list[float]] = []
        for i in range(0, len(texts), BATCH_SIZE):
            batch = texts[i : i + BATCH_SIZE]
            resp = await self._create(batch)
            # Sort by index to guarantee order
            sorted_data = sorted(resp.data, key=lambda x: x.index)
            all_embeddings.extend([d.embedding for d in sorted_data])

        return all_embeddings

    async def embed_query(self, query: str) -> list[float]:
        resp = await self._create(query)
        return resp.data[0].embedding

    @property
    def dimension(self) -> int:
        return self._dimension

    async def aclose(self) -> None:
        await self._client.close()

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    async def _create(self, payload: str | list[str]) -> Any:
        try:
            return await self._client.embeddings.create(model=self.model, input=payload)
        except self._openai.OpenAIError as exc:
            raise EmbeddingProviderError(
                f"Embedding request failed: {exc}", {"model": self.model}
            ) from exc
