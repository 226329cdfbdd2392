# metasearch_agent/application/use_cases/retrieve_documents.py
from __future__ import annotations

import logging
from collections.abc import Sequence

from metasearch_agent.application.ports.link_extractor_port import LinkExtractorPort
from metasearch_agent.application.ports.search_port import SearchPort
from metasearch_agent.application.use_cases.summarize_documents import (
    SUMMARIZE_SENTINEL,
    DocumentSummarizer,
)
from metasearch_agent.domain.errors import DomainError
from metasearch_agent.domain.models import (
    Document,
    DocumentMetadata,
    RetrievalResult,
    RewriteResult,
    SearchResult,
)
from metasearch_agent.domain.services.normalization import group_chunks_by_url
from metasearch_agent.domain.services.output_parsing import strip_think_markup
from metasearch_agent.domain.types import OptimizationMode

logger = logging.getLogger(__name__)

VIDEO_ENGINE = "youtube"
IMAGE_ENGINES = frozenset({"google images", "bing images", "qwant images", "unsplash"})
VIDEO_HOSTS = ("youtube.com", "youtu.be")
SEARCH_LANGUAGE = "en"


def filter_engines(
    engines: Sequence[str],
    mode: OptimizationMode,
    include_images: bool = False,
    include_videos: bool = False,
) -> list[str]:
    """Drop video/image engines in speed and balanced modes unless asked for."""
    if not mode.filters_media:
        return list(engines)
    kept: list[str] = []
    for engine in engines:
        name = engine.lower()
        if not include_videos and name == VIDEO_ENGINE:
            continue
        if not include_images and name in IMAGE_ENGINES:
            continue
        kept.append(engine)
    return kept


def filter_results(
    results: Sequence[SearchResult], mode: OptimizationMode, include_videos: bool = False
) -> list[SearchResult]:
    """Drop video-platform URLs under the same rule as the engine filter."""
    if not mode.filters_media or include_videos:
        return list(results)
    return [r for r in results if not any(host in r.url for host in VIDEO_HOSTS)]


def snippet_document(
    result: SearchResult, mode: OptimizationMode, include_images: bool = False
) -> Document:
    """Build a document from search-result metadata alone (no fetch)."""
    keep_image = mode is OptimizationMode.QUALITY or include_images
    return Document(
        content=result.content or result.title or "",
        metadata=DocumentMetadata(
            title=result.title,
            url=result.url,
            image_url=result.image_url if keep_image and result.image_url else None,
        ),
    )


class RetrieveDocuments:
    """
    Application Use-Case gathering candidate sources for one rewritten query.

    - explicit links → fetch, group by URL, summarize every group
    - otherwise      → web search, fetch the top results in full, snippets for the rest
    """

    def __init__(
        self,
        search: SearchPort,
        extractor: LinkExtractorPort,
        summarizer: DocumentSummarizer,
        active_engines: Sequence[str] = (),
        summarizer_enabled: bool = True,
    ) -> None:
        self.search = search
        self.extractor = extractor
        self.summarizer = summarizer
        self.active_engines = tuple(active_engines)
        self.summarizer_enabled = summarizer_enabled

    async def execute(
        self,
        rewrite: RewriteResult,
        mode: OptimizationMode,
        include_images: bool = False,
        include_videos: bool = False,
    ) -> RetrievalResult:
        if not rewrite.search_needed:
            return RetrievalResult(effective_query="", documents=[])
        if rewrite.explicit_links:
            return await self._from_links(rewrite)
        return await self._from_search(rewrite.effective_query, mode, include_images, include_videos)

    async def _from_links(self, rewrite: RewriteResult) -> RetrievalResult:
        query = rewrite.effective_query or SUMMARIZE_SENTINEL
        links = list(rewrite.explicit_links)
        logger.info("Fetching %d explicit link(s)", len(links))

        chunks = await self.extractor.extract(links)
        groups = [g for g in group_chunks_by_url(chunks) if g.has_content]
        if not groups:
            logger.warning("None of the %d link(s) yielded content", len(links))
        docs = await self.summarizer.summarize_link_groups(query, groups)
        return RetrievalResult(effective_query=query, documents=docs)

    async def _from_search(
        self,
        question: str,
        mode: OptimizationMode,
        include_images: bool,
        include_videos: bool,
    ) -> RetrievalResult:
        query = strip_think_markup(question)
        engines = filter_engines(self.active_engines, mode, include_images, include_videos)

        response = await self.search.search(query, language=SEARCH_LANGUAGE, engines=engines)
        results = filter_results(response.results, mode, include_videos)
        logger.info("Search returned %d usable result(s) for mode=%s", len(results), mode.value)

        to_fetch = results[: mode.full_fetch_count]
        full_docs = await self._fetch_full_pages(query, to_fetch)

        fetched_urls = {d.url for d in full_docs}
        snippets = [
            snippet_document(r, mode, include_images) for r in results if r.url not in fetched_urls
        ]
        return RetrievalResult(effective_query=query, documents=full_docs + snippets)

    async def _fetch_full_pages(self, query: str, results: Sequence[SearchResult]) -> list[Document]:
        if not results:
            return []
        try:
            chunks = await self.extractor.extract([r.url for r in results])
        except DomainError as ex:
            logger.warning("Full-content fetch failed, falling back to snippets: %s", ex)
            return []

        titles = {r.url: r.title for r in results if r.title}
        merged = [d for d in group_chunks_by_url(chunks, titles=titles) if d.has_content]
        if not self.summarizer_enabled:
            return merged
        return await self.summarizer.summarize_long_pages(query, merged)
