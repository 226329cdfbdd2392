# metasearch_agent/application/use_cases/summarize_documents.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from metasearch_agent.application.ports.llm_port import LLMPort
from metasearch_agent.domain.models import Document

logger = logging.getLogger(__name__)

SUMMARIZE_SENTINEL = "summarize"
LONG_PAGE_CHARS = 2000
MAX_SUMMARY_INPUT_CHARS = 8000

LINK_SUMMARY_PROMPT = """\
You are a web search summarizer. Summarize the text retrieved from a web page into a
detailed, 2-4 paragraph explanation that captures the main ideas.
If the query is "summarize", write a detailed general summary of the text. If the query is
a specific question, answer it in the summary.

- Journalistic tone: professional and precise, never casual or vague.
- Thorough: capture every key point of the text that bears on the query.
- Concise: informative but not padded.

The text is inside the `text` XML tag and the query inside the `query` XML tag.

<query>
{query}
</query>

<text>
{text}
</text>

Make sure to answer the query in the summary.
"""

PAGE_SUMMARY_PROMPT = """\
You are a web content summarizer. Summarize the following content into a detailed,
comprehensive explanation that captures all key information.
Focus on facts, data and important details. Maintain a professional tone.

<text>
{text}
</text>

<query>
{query}
</query>

Provide a detailed summary that answers the query while preserving all important information:
"""


class DocumentSummarizer:
    """
    Condenses documents into query-focused summaries, one model call per document.

    Calls for a batch are issued together and joined; a failed call keeps the
    unsummarized document and never cancels its siblings.
    """

    def __init__(self, llm: LLMPort, max_tokens: int | None = None) -> None:
        self.llm = llm
        self.max_tokens = max_tokens

    async def summarize_link_groups(self, query: str, groups: Sequence[Document]) -> list[Document]:
        """Summarize every group fetched from an explicit link (order preserved)."""
        prompts = [LINK_SUMMARY_PROMPT.format(query=query, text=g.content) for g in groups]
        return await self._summarize_all(groups, prompts)

    async def summarize_long_pages(
        self,
        query: str,
        documents: Sequence[Document],
        min_chars: int = LONG_PAGE_CHARS,
    ) -> list[Document]:
        """Summarize only documents longer than ``min_chars``; others pass through."""
        long_idx = [i for i, d in enumerate(documents) if len(d.content) > min_chars]
        if not long_idx:
            return list(documents)

        targets = [documents[i] for i in long_idx]
        prompts = [
            PAGE_SUMMARY_PROMPT.format(text=d.content[:MAX_SUMMARY_INPUT_CHARS], query=query)
            for d in targets
        ]
        summarized = await self._summarize_all(targets, prompts)

        out = list(documents)
        for i, doc in zip(long_idx, summarized, strict=True):
            out[i] = doc
        return out

    async def _summarize_all(
        self, documents: Sequence[Document], prompts: Sequence[str]
    ) -> list[Document]:
        outcomes = await asyncio.gather(
            *(self.llm.generate(p, temperature=0.0, max_tokens=self.max_tokens) for p in prompts),
            return_exceptions=True,
        )
        result: list[Document] = []
        for doc, outcome in zip(documents, outcomes, strict=True):
            if isinstance(outcome, Exception):
                logger.warning("Summarization failed for %s, keeping original: %s", doc.url, outcome)
                result.append(doc)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.append(doc.with_content(outcome))
        logger.debug("Summarized %d document(s)", len(result))
        return result
