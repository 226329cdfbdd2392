# metasearch_agent/domain/services/normalization.py
# Pure domain services: no I/O, deterministic, no external libraries.
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace

from metasearch_agent.domain.models import MAX_MERGED_CHUNKS, Document

CHUNK_SEPARATOR = "\n\n"


def group_chunks_by_url(
    chunks: Sequence[Document],
    max_chunks: int = MAX_MERGED_CHUNKS,
    titles: Mapping[str, str] | None = None,
) -> list[Document]:
    """
    Fold extractor chunks that share a URL into logical documents.

    - Chunks are appended (joined by a blank line) to the open document for
      their URL until it holds ``max_chunks`` chunks; the next chunk for that
      URL opens a new document.
    - Output order follows the first appearance of each logical document.
    - ``titles`` optionally overrides the title per URL (e.g. the search
      result title, which is usually cleaner than the page's <title>).
    """
    if max_chunks <= 0:
        raise ValueError("max_chunks must be > 0")

    groups: list[Document] = []
    open_index: dict[str, int] = {}

    for chunk in chunks:
        url = chunk.metadata.url
        idx = open_index.get(url)
        if idx is not None:
            current = groups[idx]
            count = (current.metadata.merged_chunk_count or 1) + 1
            groups[idx] = Document(
                content=current.content + CHUNK_SEPARATOR + chunk.content,
                metadata=replace(current.metadata, merged_chunk_count=count),
            )
            if count >= max_chunks:
                del open_index[url]
            continue

        title = (titles or {}).get(url) or chunk.metadata.title
        groups.append(
            Document(
                content=chunk.content,
                metadata=replace(chunk.metadata, title=title, merged_chunk_count=1),
            )
        )
        if max_chunks > 1:
            open_index[url] = len(groups) - 1

    return groups
