# metasearch_agent/application/use_cases/rerank_documents.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from metasearch_agent.application.ports.embedding_port import EmbeddingPort
from metasearch_agent.application.ports.file_store_port import FileStorePort
from metasearch_agent.application.use_cases.summarize_documents import SUMMARIZE_SENTINEL
from metasearch_agent.domain.errors import FileStoreError
from metasearch_agent.domain.models import Document, UploadedFile
from metasearch_agent.domain.services.ranking import rank_by_similarity
from metasearch_agent.domain.types import OptimizationMode

logger = logging.getLogger(__name__)

# Uploaded-file hits may not crowd out web sources entirely in speed mode.
MAX_FILE_SOURCES_WITH_WEB = 8


class RerankDocuments:
    """
    Application Use-Case picking and ordering the final sources of an answer.

    Precedence (first match wins):
    1. nothing to rank                  → input unchanged
    2. query is "summarize"             → first ``limit`` candidates
    3. no embedding provider            → first ``limit`` candidates with content
    4. speed mode or reranking disabled → ranked file chunks + web docs in original order
    5. balanced / quality               → everything ranked by cosine similarity

    Uploaded files are read before any of this, so a broken upload fails the
    request even when its chunks would not be ranked.
    """

    def __init__(
        self,
        file_store: FileStorePort,
        embedding: EmbeddingPort | None = None,
        rerank_enabled: bool = True,
        rerank_threshold: float = 0.3,
        max_sources: int = 15,
    ) -> None:
        self.file_store = file_store
        self.embedding = embedding
        self.rerank_enabled = rerank_enabled
        self.rerank_threshold = rerank_threshold
        self.max_sources = max_sources

    async def execute(
        self,
        query: str,
        documents: Sequence[Document],
        file_ids: Sequence[str],
        mode: OptimizationMode,
        sources_limit: int,
    ) -> list[Document]:
        if not documents and not file_ids:
            return list(documents)

        files = [self.file_store.load(fid) for fid in file_ids]

        if query.lower() == SUMMARIZE_SENTINEL:
            return list(documents[:sources_limit])

        with_content = [d for d in documents if d.has_content]

        if self.embedding is None:
            return with_content[:sources_limit]

        if mode is OptimizationMode.SPEED or not self.rerank_enabled:
            return await self._rank_files_then_fill(query, with_content, files, sources_limit)

        # quality shares balanced ranking
        return await self._rank_all(query, with_content, files, sources_limit)

    async def _rank_files_then_fill(
        self,
        query: str,
        web_docs: list[Document],
        files: list[UploadedFile],
        sources_limit: int,
    ) -> list[Document]:
        file_docs, file_vectors = _flatten(files)
        if not file_docs:
            return web_docs[:sources_limit]

        query_vec = await self._embed_query(query)
        _check_dimensions(files, len(query_vec))
        ranked = rank_by_similarity(query_vec, file_docs, file_vectors, self.rerank_threshold)
        picked = [c.document for c in ranked[:sources_limit]]
        if web_docs:
            picked = picked[:MAX_FILE_SOURCES_WITH_WEB]

        filler = web_docs[: max(sources_limit - len(picked), 0)]
        logger.debug("Speed rerank: %d file chunk(s) + %d web doc(s)", len(picked), len(filler))
        return picked + filler

    async def _rank_all(
        self,
        query: str,
        web_docs: list[Document],
        files: list[UploadedFile],
        sources_limit: int,
    ) -> list[Document]:
        file_docs, file_vectors = _flatten(files)
        if not web_docs and not file_docs:
            return []

        web_vectors: list[list[float]] = []
        if web_docs:
            web_vectors = await asyncio.to_thread(
                self.embedding.embed_texts, [d.content for d in web_docs]  # type: ignore[union-attr]
            )
        query_vec = await self._embed_query(query)
        _check_dimensions(files, len(query_vec))

        ranked = rank_by_similarity(
            query_vec,
            web_docs + file_docs,
            list(web_vectors) + file_vectors,
            self.rerank_threshold,
        )
        limit = min(sources_limit, self.max_sources)
        logger.debug("Similarity rerank kept %d of %d candidate(s)", len(ranked), len(web_docs) + len(file_docs))
        return [c.document for c in ranked[:limit]]

    async def _embed_query(self, query: str) -> list[float]:
        return await asyncio.to_thread(self.embedding.embed_query, query)  # type: ignore[union-attr]


def _flatten(files: Sequence[UploadedFile]) -> tuple[list[Document], list[Sequence[float]]]:
    docs: list[Document] = []
    vectors: list[Sequence[float]] = []
    for f in files:
        docs.extend(f.as_documents())
        vectors.extend(f.embeddings)
    return docs, vectors


def _check_dimensions(files: Sequence[UploadedFile], dim: int) -> None:
    for f in files:
        if f.embeddings and f.dimension != dim:
            raise FileStoreError(
                f.file_id, f"embeddings have {f.dimension} dimensions, query has {dim}"
            )
