"""Abstract base class for chat completion providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from docchat.llm.schemas import ChatMessage

DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.7


class LLMProvider(ABC):
    """Interface for chat completion.

    Implementations return the assistant's text, ``""`` when the provider
    answered without content, and raise ``ChatProviderError`` on transport
    or auth failures.
    """

    model: str = ""

    @abstractmethod
    async def chat(self, messages: list[ChatMessage]) -> str:
        """Complete a conversation.

        Args:
            messages: System prompt (if any) followed by the history.

        Returns:
            The generated reply text.
        """

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
