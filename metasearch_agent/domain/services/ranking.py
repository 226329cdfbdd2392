"""Pure domain functions for similarity ranking.

Deterministic and free of I/O: the same query vector, candidates and
threshold always produce the same ordering.
"""

from __future__ import annotations

from collections.abc import Sequence

from metasearch_agent.domain.models import Document, RankedCandidate
from metasearch_agent.domain.similarity import cosine


def rank_by_similarity(
    query_vector: Sequence[float],
    documents: Sequence[Document],
    vectors: Sequence[Sequence[float]],
    threshold: float,
) -> list[RankedCandidate]:
    """Score documents against the query and keep those strictly above ``threshold``.

    Args:
        query_vector: Embedded query
        documents: Candidate documents
        vectors: One embedding per document (same order)
        threshold: Minimum similarity; candidates must exceed it

    Returns:
        Surviving candidates sorted by similarity, highest first. Ties keep
        their input order.
    """
    if len(documents) != len(vectors):
        raise ValueError(f"{len(documents)} documents but {len(vectors)} vectors")

    scored = [
        RankedCandidate(document=doc, similarity=cosine(query_vector, vec))
        for doc, vec in zip(documents, vectors, strict=True)
    ]
    kept = [c for c in scored if c.similarity > threshold]
    kept.sort(key=lambda c: c.similarity, reverse=True)
    return kept
