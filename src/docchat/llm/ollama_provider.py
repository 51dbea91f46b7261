"""Ollama chat provider — local-first, no API keys.

Supports Llama, Mistral, Qwen and any chat model available via Ollama.
"""

from __future__ import annotations

import logging

import httpx

from docchat.exceptions import ChatProviderError
from docchat.llm.base import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, LLMProvider
from docchat.llm.schemas import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama3.1:8b"
DEFAULT_BASE_URL = "http://localhost:11434"


class OllamaLLMProvider(LLMProvider):
    """Generate responses via a local Ollama server."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    async def chat(self, messages: list[ChatMessage]) -> str:
        payload = {
            "model": self.model,
            "messages": [m.to_dict() for m in messages],
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            },
        }

        try:
            resp = await self._client.post("/api/chat", json=payload)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as exc:
            raise ChatProviderError(
                f"Ollama chat request failed: {exc}", {"model": self.model}
            ) from exc
        except ValueError as exc:
            raise ChatProviderError(
                "Malformed Ollama chat response", {"model": self.model}
            ) from exc

        return (data.get("message") or {}).get("content", "")

    async def aclose(self) -> None:
        await self._client.aclose()
