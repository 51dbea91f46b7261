"""Chat completion providers — OpenAI/Azure, Anthropic, Ollama."""

from docchat.llm.base import LLMProvider
from docchat.llm.factory import available_providers, get_llm_provider
from docchat.llm.schemas import ChatMessage

__all__ = ["ChatMessage", "LLMProvider", "available_providers", "get_llm_provider"]
