# metasearch_agent/application/use_cases/answer_query.py
from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from enum import Enum

from metasearch_agent.application.dto.agent_config import AgentConfig
from metasearch_agent.application.dto.answer_dto import AnswerRequest
from metasearch_agent.application.ports.clock_port import ClockPort
from metasearch_agent.application.ports.embedding_port import EmbeddingPort
from metasearch_agent.application.ports.file_store_port import FileStorePort
from metasearch_agent.application.ports.link_extractor_port import LinkExtractorPort
from metasearch_agent.application.ports.llm_port import LLMPort
from metasearch_agent.application.ports.search_port import SearchPort
from metasearch_agent.application.ports.telemetry_port import NullTelemetry, TelemetryPort
from metasearch_agent.application.use_cases.rerank_documents import RerankDocuments
from metasearch_agent.application.use_cases.retrieve_documents import RetrieveDocuments
from metasearch_agent.application.use_cases.rewrite_query import QueryRewriter
from metasearch_agent.application.use_cases.summarize_documents import DocumentSummarizer
from metasearch_agent.domain.errors import DomainError, LLMError, RetrievalError, ValidationError
from metasearch_agent.domain.events import EndEvent, ErrorEvent, Event, ResponseEvent, SourcesEvent
from metasearch_agent.domain.models import ChatMessage, Document
from metasearch_agent.domain.services.formatting import format_chat_history, render_context
from metasearch_agent.domain.types import Result

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    RETRIEVING = "retrieving"
    RERANKING = "reranking"
    GENERATING = "generating"
    DONE = "done"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (PipelineState.DONE, PipelineState.FAILED)


class AnswerQuery:
    """
    Application Use-Case answering one conversational query from web sources.

    The agent holds only immutable configuration and ports, so one instance
    can serve many concurrent requests. Each request gets its own
    ``AnswerSession`` carrying the request-scoped state.
    """

    def __init__(
        self,
        config: AgentConfig,
        llm: LLMPort,
        search: SearchPort,
        extractor: LinkExtractorPort,
        file_store: FileStorePort,
        embedding: EmbeddingPort | None = None,
        clock: ClockPort | None = None,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        self.config = config
        self.llm = llm
        self.search = search
        self.extractor = extractor
        self.file_store = file_store
        self.embedding = embedding
        self.clock = clock
        self.telemetry: TelemetryPort = telemetry or NullTelemetry()
        self.rewriter = QueryRewriter(
            llm, config.query_rewrite_prompt, summarizer_enabled=config.summarizer_enabled
        )
        self.reranker = RerankDocuments(
            file_store=file_store,
            embedding=embedding,
            rerank_enabled=config.rerank_enabled,
            rerank_threshold=config.rerank_threshold,
            max_sources=config.default_max_sources,
        )

    def session(self, request: AnswerRequest) -> AnswerSession:
        return AnswerSession(self, request)

    def stream(self, request: AnswerRequest) -> AsyncIterator[Event]:
        """Ordered events for one request: sources → response* → end (or error)."""
        return self.session(request).events()

    def retriever(self, max_tokens: int | None = None) -> RetrieveDocuments:
        return RetrieveDocuments(
            search=self.search,
            extractor=self.extractor,
            summarizer=DocumentSummarizer(self.llm, max_tokens=max_tokens),
            active_engines=self.config.active_engines,
            summarizer_enabled=self.config.summarizer_enabled,
        )

    def sources_limit(self, request: AnswerRequest) -> int:
        return request.max_sources or self.config.default_max_sources

    def render_answer_prompt(self, request: AnswerRequest, sources: list[Document]) -> str:
        now = self.clock.now() if self.clock is not None else None
        return self.config.answer_prompt.format(
            systemInstructions=request.system_instructions,
            context=render_context(sources),
            date=now.isoformat() if now is not None else "",
        )


class AnswerSession:
    """One request's walk through IDLE → RETRIEVING → RERANKING → GENERATING → DONE.

    Any failure moves to FAILED and ends the stream with an ErrorEvent; a
    terminal session yields nothing further.
    """

    def __init__(self, agent: AnswerQuery, request: AnswerRequest) -> None:
        self.agent = agent
        self.request = request
        self.state = PipelineState.IDLE
        self.effective_query: str | None = None
        self.sources: list[Document] = []
        self._stage_started = time.perf_counter()

    async def events(self) -> AsyncIterator[Event]:
        if self.state is not PipelineState.IDLE:
            raise RuntimeError("an AnswerSession can only be consumed once")
        started = time.perf_counter()

        prepared = await self._collect_sources()
        if not prepared.ok or prepared.value is None:
            yield self._fail(prepared.error or RetrievalError("no sources produced"), started)
            return

        self.sources = prepared.value
        self._enter(PipelineState.GENERATING)
        yield SourcesEvent(documents=list(self.sources))

        messages = self._answer_messages()
        try:
            async for fragment in self.agent.llm.stream(
                messages, temperature=0.0, max_tokens=self.request.max_tokens
            ):
                yield ResponseEvent(text=fragment)
        except DomainError as ex:
            yield self._fail(ex, started)
            return
        except Exception as ex:  # noqa: BLE001
            yield self._fail(LLMError(f"answer generation failed: {ex}"), started)
            return

        self._enter(PipelineState.DONE)
        self._record("done", started)
        yield EndEvent()

    async def _collect_sources(self) -> Result[list[Document], DomainError]:
        req = self.request
        agent = self.agent

        # 1) Validate
        if not req.message or not req.message.strip():
            return Result.failure(ValidationError("message must not be empty"))
        if req.max_sources is not None and req.max_sources <= 0:
            return Result.failure(ValidationError("max_sources must be > 0"))

        mode = req.optimization_mode
        query = req.message
        docs: list[Document] = []

        # 2) Rewrite + retrieve
        self._enter(PipelineState.RETRIEVING)
        if agent.config.search_enabled:
            try:
                rewrite = await agent.rewriter.rewrite(
                    format_chat_history(req.history), req.message, max_tokens=req.max_tokens
                )
                retrieval = await agent.retriever(req.max_tokens).execute(
                    rewrite,
                    mode,
                    include_images=req.include_images,
                    include_videos=req.include_videos,
                )
            except DomainError as ex:
                return Result.failure(ex)
            except Exception as ex:  # noqa: BLE001
                return Result.failure(RetrievalError(f"retrieval failed: {ex}"))
            query = retrieval.effective_query
            docs = retrieval.documents
        self.effective_query = query

        # 3) Rerank
        self._enter(PipelineState.RERANKING)
        try:
            ranked = await agent.reranker.execute(
                query, docs, req.file_ids, mode, agent.sources_limit(req)
            )
        except DomainError as ex:
            return Result.failure(ex)
        except Exception as ex:  # noqa: BLE001
            return Result.failure(RetrievalError(f"rerank failed: {ex}"))

        agent.telemetry.observe("agent.sources.count", len(ranked), {"mode": mode.value})
        return Result.success(ranked)

    def _answer_messages(self) -> list[ChatMessage]:
        system = self.agent.render_answer_prompt(self.request, self.sources)
        return [
            ChatMessage(role="system", content=system),
            *self.request.history,
            ChatMessage(role="user", content=self.request.message),
        ]

    def _enter(self, state: PipelineState) -> None:
        logger.info("Answer pipeline %s -> %s", self.state.value, state.value)
        now = time.perf_counter()
        if self.state is not PipelineState.IDLE:
            self.agent.telemetry.observe(
                "agent.stage.latency_ms",
                (now - self._stage_started) * 1000.0,
                {"stage": self.state.value, "mode": self.request.optimization_mode.value},
            )
        self._stage_started = now
        self.state = state

    def _fail(self, error: BaseException, started: float) -> ErrorEvent:
        logger.error("Answer pipeline failed in state %s: %s", self.state.value, error)
        self._enter(PipelineState.FAILED)
        self._record("failed", started)
        return ErrorEvent(message=str(error), error_type=type(error).__name__)

    def _record(self, status: str, started: float) -> None:
        tags = {"status": status, "mode": self.request.optimization_mode.value}
        self.agent.telemetry.incr("agent.requests.total", tags)
        self.agent.telemetry.observe(
            "agent.request.latency_ms", (time.perf_counter() - started) * 1000.0, tags
        )
