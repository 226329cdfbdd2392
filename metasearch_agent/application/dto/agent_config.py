# metasearch_agent/application/dto/agent_config.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AgentConfig:
    """
    Immutable per-agent configuration, shared by every request the agent serves.

    - search_enabled:       run query rewriting + web retrieval before answering
    - rerank_enabled:       allow similarity reranking (speed mode never reranks web docs)
    - summarizer_enabled:   parse the rewritten question and summarize long pages
    - rerank_threshold:     candidates must score strictly above this to survive
    - query_rewrite_prompt: template with {chat_history} and {query}
    - answer_prompt:        template with {systemInstructions}, {context} and {date}
    - active_engines:       search engines passed to the backend (empty = backend default)
    - default_max_sources:  source limit when a request does not name one
    """

    query_rewrite_prompt: str
    answer_prompt: str
    search_enabled: bool = True
    rerank_enabled: bool = True
    summarizer_enabled: bool = True
    rerank_threshold: float = 0.3
    active_engines: tuple[str, ...] = ()
    default_max_sources: int = 15

    def __post_init__(self) -> None:
        if self.default_max_sources <= 0:
            raise ValueError("default_max_sources must be > 0")
