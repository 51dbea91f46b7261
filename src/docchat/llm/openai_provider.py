"""OpenAI chat provider — GPT-4o family, Azure OpenAI deployments and
OpenAI-compatible endpoints.

Requires the ``openai`` extra and ``OPENAI_API_KEY`` (or
``AZURE_OPENAI_API_KEY`` with ``azure_endpoint``).
"""

from __future__ import annotations

import logging
from typing import Any

from docchat.exceptions import ChatProviderError
from docchat.llm.base import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, LLMProvider
from docchat.llm.schemas import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_AZURE_API_VERSION = "2024-02-01"


class OpenAILLMProvider(LLMProvider):
    """Generate responses via the OpenAI Chat Completions API."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        base_url: str | None = None,
        azure_endpoint: str | None = None,
        api_version: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        try:
            import openai
        except ImportError as exc:
            raise ImportError(
                "openai package required: pip install document-chat-rag[openai]"
            ) from exc

        self._openai = openai
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

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

    async def chat(self, messages: list[ChatMessage]) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[m.to_dict() for m in messages],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except self._openai.OpenAIError as exc:
            raise ChatProviderError(
                f"Chat completion failed: {exc}", {"model": self.model}
            ) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        await self._client.close()
