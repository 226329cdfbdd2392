# metasearch_agent/domain/models.py
# Domain models must be pure (no I/O, no external libs)
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

MAX_MERGED_CHUNKS = 10
FILE_SOURCE_URL = "File"


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "system" | "user" | "assistant"
    content: str


@dataclass(frozen=True)
class DocumentMetadata:
    """
    Where a piece of text came from.

    - title:              page or file title shown in the citation list
    - url:                source URL, or "File" for uploaded-file chunks
    - image_url:          thumbnail for snippet documents (only when images are wanted)
    - merged_chunk_count: number of extractor chunks folded into this document
    """

    title: str
    url: str
    image_url: str | None = None
    merged_chunk_count: int | None = None


@dataclass(frozen=True)
class Document:
    """A unit of retrieved text. Immutable; rewrites produce a new instance."""

    content: str
    metadata: DocumentMetadata

    @property
    def title(self) -> str:
        return self.metadata.title

    @property
    def url(self) -> str:
        return self.metadata.url

    @property
    def has_content(self) -> bool:
        return bool(self.content)

    def with_content(self, content: str) -> Document:
        return replace(self, content=content)

    def to_dict(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"title": self.metadata.title, "url": self.metadata.url}
        if self.metadata.image_url is not None:
            meta["image_url"] = self.metadata.image_url
        if self.metadata.merged_chunk_count is not None:
            meta["merged_chunk_count"] = self.metadata.merged_chunk_count
        return {"content": self.content, "metadata": meta}


@dataclass(frozen=True)
class RewriteResult:
    """Output of the query rewriter. An empty query with no links means "no search"."""

    effective_query: str
    explicit_links: tuple[str, ...] = ()

    @property
    def search_needed(self) -> bool:
        return bool(self.effective_query) or bool(self.explicit_links)


@dataclass(frozen=True)
class RetrievalResult:
    effective_query: str
    documents: list[Document] = field(default_factory=list)


@dataclass(frozen=True)
class RankedCandidate:
    document: Document
    similarity: float


@dataclass(frozen=True)
class SearchResult:
    title: str
    url: str
    content: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class SearchResponse:
    results: list[SearchResult]
    suggestions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UploadedFile:
    """Pre-chunked text of an uploaded file with one embedding per chunk."""

    file_id: str
    title: str
    chunks: tuple[str, ...]
    embeddings: tuple[tuple[float, ...], ...]

    def __post_init__(self) -> None:
        if len(self.chunks) != len(self.embeddings):
            raise ValueError(
                f"file '{self.file_id}' has {len(self.chunks)} chunks but "
                f"{len(self.embeddings)} embeddings"
            )
        dims = {len(v) for v in self.embeddings}
        if 0 in dims:
            raise ValueError(f"file '{self.file_id}' has an empty embedding")
        if len(dims) > 1:
            raise ValueError(f"file '{self.file_id}' mixes embedding sizes {sorted(dims)}")

    @property
    def dimension(self) -> int:
        return len(self.embeddings[0]) if self.embeddings else 0

    def as_documents(self) -> list[Document]:
        meta = DocumentMetadata(title=self.title, url=FILE_SOURCE_URL)
        return [Document(content=c, metadata=meta) for c in self.chunks]
