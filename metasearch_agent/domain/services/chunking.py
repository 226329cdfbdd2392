from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

# ---------- Value Objects ----------


@dataclass(frozen=True)
class ChunkingParams:
    target_chars: int = 1000
    overlap_chars: int = 150
    max_overhang: int = 200

    def __post_init__(self) -> None:
        if self.target_chars <= 0:
            raise ValueError("target_chars must be > 0")
        if not 0 <= self.overlap_chars < self.target_chars:
            raise ValueError("overlap_chars must be in [0, target_chars)")


# ---------- Splitting ----------

_SENT_END = re.compile(r"(?<=[.!?])\s+(?=[A-Z0-9\"'(\[])")


def split_into_paragraphs(text: str) -> list[str]:
    """Blank lines separate paragraphs."""
    paras = [p.strip() for p in re.split(r"\n\s*\n", text) if p.strip()]
    return paras if paras else ([text.strip()] if text.strip() else [])


def split_into_sentences(paragraph: str) -> list[str]:
    """Naive sentence split on terminal punctuation followed by a capital."""
    paragraph = " ".join(paragraph.split())
    if not paragraph:
        return []
    return [s.strip() for s in _SENT_END.split(paragraph) if s.strip()]


def _hard_split(sentence: str, limit: int) -> list[str]:
    # Pages without punctuation (tables, nav dumps) produce giant "sentences".
    if len(sentence) <= limit:
        return [sentence]
    return [sentence[i : i + limit] for i in range(0, len(sentence), limit)]


# ---------- Packing ----------


def pack_sentences(sentences: Sequence[str], p: ChunkingParams) -> list[str]:
    """Greedily pack sentences into chunks of about ``target_chars``.

    A chunk may run over the target by ``max_overhang`` to avoid cutting a
    sentence. Each new chunk starts with the last ``overlap_chars`` of the
    previous one.
    """
    limit = p.target_chars + p.max_overhang
    chunks: list[str] = []
    curr: list[str] = []
    curr_len = 0
    fresh = 0  # sentences added since the last flush (overlap tail excluded)

    for sentence in sentences:
        for piece in _hard_split(sentence, p.target_chars):
            piece_len = len(piece) + (1 if curr else 0)
            if curr_len + piece_len <= p.target_chars or (
                fresh and curr_len + piece_len <= limit
            ):
                curr.append(piece)
                curr_len += piece_len
                fresh += 1
                continue

            if fresh:
                text = " ".join(curr)
                chunks.append(text)
                tail = text[-p.overlap_chars :] if p.overlap_chars else ""
                curr = [tail] if tail else []
                curr_len = len(tail)

            curr.append(piece)
            curr_len += len(piece) + (1 if len(curr) > 1 else 0)
            fresh = 1

    if fresh:
        chunks.append(" ".join(curr))
    return chunks


def split_text(text: str, params: ChunkingParams | None = None) -> list[str]:
    """Pipeline: paragraphs → sentences → packed, overlapping chunks."""
    p = params or ChunkingParams()
    sentences: list[str] = []
    for para in split_into_paragraphs(text):
        sentences.extend(split_into_sentences(para))
    return pack_sentences(sentences, p)
