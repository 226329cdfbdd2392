# metasearch_agent/application/use_cases/rewrite_query.py
from __future__ import annotations

import logging

from metasearch_agent.application.ports.llm_port import LLMPort
from metasearch_agent.domain.models import RewriteResult
from metasearch_agent.domain.services.output_parsing import parse_line, parse_line_list

logger = logging.getLogger(__name__)

NOT_NEEDED = "not_needed"


class QueryRewriter:
    """
    Turns a conversational follow-up into a standalone search query.

    One model call per request. The prompt asks for a ``<question>`` block and
    optionally a ``<links>`` block; ``not_needed`` (greetings, writing tasks)
    yields the empty sentinel and no retrieval happens.
    """

    def __init__(self, llm: LLMPort, prompt_template: str, summarizer_enabled: bool = True) -> None:
        self.llm = llm
        self.prompt_template = prompt_template
        self.summarizer_enabled = summarizer_enabled

    async def rewrite(
        self, chat_history: str, query: str, max_tokens: int | None = None
    ) -> RewriteResult:
        prompt = self.prompt_template.format(chat_history=chat_history, query=query)
        raw = await self.llm.generate(prompt, temperature=0.0, max_tokens=max_tokens)

        links = parse_line_list(raw, key="links")
        question = parse_line(raw, key="question") if self.summarizer_enabled else raw

        if question.strip() == NOT_NEEDED:
            logger.info("Rewriter says no search is needed")
            return RewriteResult(effective_query="")

        if not question and not links:
            logger.debug("Rewriter output had no question/links markers")
        return RewriteResult(effective_query=question, explicit_links=tuple(links))
