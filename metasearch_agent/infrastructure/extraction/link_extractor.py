from __future__ import annotations

import asyncio
import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import httpx

from metasearch_agent.application.ports.link_extractor_port import LinkExtractorPort
from metasearch_agent.domain.errors import ExtractionError
from metasearch_agent.domain.models import Document, DocumentMetadata
from metasearch_agent.domain.services.chunking import ChunkingParams, split_text

logger = logging.getLogger(__name__)

FAILED_TITLE = "Failed to retrieve content"
_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


def normalize_link(link: str) -> str:
    link = link.strip()
    if link.startswith(("http://", "https://")):
        return link
    return f"https://{link}"


def html_to_text(html: str) -> tuple[str, str | None]:
    """Return (visible text, <title>) of an HTML page."""
    from bs4 import BeautifulSoup

    soup = BeautifulSoup(html, "html.parser")
    title = soup.title.get_text(strip=True) if soup.title else None
    for tag in soup(["script", "style", "noscript", "nav", "footer", "header", "svg"]):
        tag.decompose()
    lines = (line.strip() for line in soup.get_text(separator="\n").splitlines())
    text = "\n".join(line for line in lines if line)
    return text, title or None


def pdf_to_text(data: bytes) -> tuple[str, str | None]:
    from pypdf import PdfReader

    reader = PdfReader(io.BytesIO(data))
    pages = [p.extract_text() or "" for p in reader.pages]
    text = "\n\n".join(pages).strip()
    title = reader.metadata.title if getattr(reader, "metadata", None) else None
    return text, title or None


@dataclass
class HttpLinkExtractor(LinkExtractorPort):
    """Fetches links concurrently and splits each page into overlapping chunks.

    A link that cannot be fetched or parsed yields one empty placeholder
    document titled "Failed to retrieve content"; only a broken client fails
    the whole batch.
    """

    timeout_s: float = 10.0
    max_concurrency: int = 8
    chunking: ChunkingParams = field(default_factory=ChunkingParams)
    transport: httpx.AsyncBaseTransport | None = None  # injected in tests

    async def extract(self, urls: Sequence[str]) -> list[Document]:
        links = [normalize_link(u) for u in urls if u and u.strip()]
        if not links:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s,
                follow_redirects=True,
                headers={"User-Agent": _USER_AGENT},
                transport=self.transport,
            ) as client:

                async def one(link: str) -> list[Document]:
                    async with semaphore:
                        return await self._extract_one(client, link)

                per_link = await asyncio.gather(*(one(link) for link in links))
        except httpx.HTTPError as ex:
            raise ExtractionError(f"link extraction failed: {ex}") from ex

        return [doc for docs in per_link for doc in docs]

    async def _extract_one(self, client: httpx.AsyncClient, link: str) -> list[Document]:
        try:
            resp = await client.get(link)
            resp.raise_for_status()
            content_type = resp.headers.get("content-type", "").lower()
            if "application/pdf" in content_type or link.lower().endswith(".pdf"):
                text, title = await asyncio.to_thread(pdf_to_text, resp.content)
            else:
                text, title = await asyncio.to_thread(html_to_text, resp.text)
        except Exception as ex:  # noqa: BLE001
            logger.warning("Could not extract %s: %s", link, ex)
            return [Document(content="", metadata=DocumentMetadata(title=FAILED_TITLE, url=link))]

        meta = DocumentMetadata(title=title or link, url=link)
        chunks = split_text(text, self.chunking)
        logger.debug("Extracted %d chunk(s) from %s", len(chunks), link)
        if not chunks:
            return [Document(content="", metadata=meta)]
        return [Document(content=c, metadata=meta) for c in chunks]
