"""System prompt templates for grounded document chat.

Two axes: file vs. folder scope, and grounded vs. no grounding found.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Grounded prompts
# ---------------------------------------------------------------------------

GROUNDED_FILE_PROMPT = """\
You are an assistant helping with a PDF document. Use the following \
information from the document to answer questions:

{context}

Answer based on this document content. Be specific and reference the \
information when possible."""

GROUNDED_FOLDER_PROMPT = """\
You are an assistant helping with multiple PDF documents in a folder. Use \
the following information from the documents to answer questions:

{context}

Answer based on this document content. Be specific and reference the \
information when possible."""

# ---------------------------------------------------------------------------
# No-grounding prompts
# ---------------------------------------------------------------------------

NO_GROUNDING_FILE_PROMPT = """\
You are an assistant helping with a PDF document. I wasn't able to find \
specific information from the document for this question. This could be \
because the information isn't present or there are processing issues."""

NO_GROUNDING_FOLDER_PROMPT = """\
You are an assistant helping with PDF documents in a folder. I wasn't able \
to find specific information from the documents for this question. This \
could be because the information isn't present or there are processing \
issues."""

FALLBACK_ANSWER = "I apologize, but I couldn't generate a response. Please try again."


def format_context(texts: list[str]) -> str:
    """Number retrieved chunk texts as ``[Context i]: text`` blocks.

    Args:
        texts: Chunk texts in retrieval order.

    Returns:
        The blocks joined by blank lines.
    """
    return "\n\n".join(f"[Context {i}]: {text}" for i, text in enumerate(texts, 1))


def build_system_prompt(context_texts: list[str], folder: bool) -> str:
    """Pick and fill the system prompt for one chat turn.

    Args:
        context_texts: Retrieved chunk texts; empty means no grounding.
        folder: Whether the chat is scoped to a folder.

    Returns:
        The system prompt string.
    """
    if not context_texts:
        return NO_GROUNDING_FOLDER_PROMPT if folder else NO_GROUNDING_FILE_PROMPT
    template = GROUNDED_FOLDER_PROMPT if folder else GROUNDED_FILE_PROMPT
    return template.format(context=format_context(context_texts))
