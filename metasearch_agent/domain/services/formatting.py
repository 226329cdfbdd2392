from __future__ import annotations

from collections.abc import Sequence

from metasearch_agent.domain.models import ChatMessage, Document

_ROLE_LABELS = {"user": "Human", "assistant": "AI", "system": "System"}


def format_chat_history(history: Sequence[ChatMessage]) -> str:
    """Render the conversation as ``Role: text`` lines for the rewrite prompt."""
    return "\n".join(
        f"{_ROLE_LABELS.get(m.role, m.role.capitalize())}: {m.content}" for m in history
    )


def render_context(documents: Sequence[Document]) -> str:
    """Number the sources so ``[n]`` citations in the answer map 1:1 to them."""
    return "\n".join(
        f"{i}. {doc.metadata.title} {doc.content}" for i, doc in enumerate(documents, start=1)
    )
