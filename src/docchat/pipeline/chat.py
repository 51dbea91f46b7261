"""Chat pipeline — conversation → retrieve → system prompt → LLM answer."""

from __future__ import annotations

import logging

from docchat.llm.base import LLMProvider
from docchat.llm.schemas import ChatMessage
from docchat.pipeline.prompts import FALLBACK_ANSWER, build_system_prompt
from docchat.pipeline.schemas import ChatResponse, GroundingStatus
from docchat.retrieval.retriever import Retriever
from docchat.retrieval.schemas import RetrievalScope

logger = logging.getLogger(__name__)


class ChatPipeline:
    """Orchestrates one grounded chat turn.

    Retrieval problems degrade to an explicit no-grounding prompt; errors
    from the chat provider itself always propagate.
    """

    def __init__(self, retriever: Retriever, llm_provider: LLMProvider):
        self.retriever = retriever
        self.llm_provider = llm_provider

    async def chat(
        self,
        messages: list[ChatMessage],
        scope: RetrievalScope,
        user_id: str | None,
    ) -> ChatResponse:
        """Answer the latest user message using the scoped documents.

        Args:
            messages: Conversation history, oldest first.
            scope: The file or folder being chatted with.
            user_id: Owner of the documents.

        Returns:
            A ``ChatResponse`` with the answer and the context used.

        Raises:
            ChatProviderError: if the completion call fails.
        """
        question = self._latest_user_message(messages)

        grounding = GroundingStatus.SKIPPED
        context = []
        files_searched = files_with_hits = 0

        if question is not None:
            retrieval = await self.retriever.retrieve(question, scope, user_id)
            context = retrieval.matches
            files_searched = retrieval.files_searched
            files_with_hits = retrieval.files_with_hits
            if context:
                grounding = GroundingStatus.GROUNDED
            else:
                grounding = GroundingStatus.NO_GROUNDING_FOUND
                logger.warning(
                    "No grounding found for scope %s (%d files searched)",
                    scope, files_searched,
                )

        system_prompt = build_system_prompt([m.text for m in context], folder=scope.is_folder)
        answer = await self.llm_provider.chat(
            [ChatMessage("system", system_prompt), *messages]
        )
        if not answer.strip():
            logger.warning("Chat provider returned empty content, using fallback answer")
            answer = FALLBACK_ANSWER

        logger.info(
            "Chat turn answered: grounding=%s, %d context chunks",
            grounding.value, len(context),
        )

        return ChatResponse(
            answer=answer,
            grounding=grounding,
            context=context,
            system_prompt=system_prompt,
            files_searched=files_searched,
            files_with_hits=files_with_hits,
            model=getattr(self.llm_provider, "model", "unknown"),
        )

    @staticmethod
    def _latest_user_message(messages: list[ChatMessage]) -> str | None:
        for message in reversed(messages):
            if message.role == "user":
                return message.content
        return None
