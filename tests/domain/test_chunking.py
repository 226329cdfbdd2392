import pytest

from metasearch_agent.domain.services.chunking import (
    ChunkingParams,
    pack_sentences,
    split_into_paragraphs,
    split_into_sentences,
    split_text,
)


def test_paragraph_and_sentence_split():
    text = "First sentence. Second one! Third?\n\nNext paragraph here."
    paras = split_into_paragraphs(text)
    assert paras == ["First sentence. Second one! Third?", "Next paragraph here."]
    assert split_into_sentences(paras[0]) == ["First sentence.", "Second one!", "Third?"]


def test_empty_text_has_no_chunks():
    assert split_text("") == []
    assert split_text("   \n\n  ") == []


def test_short_text_is_one_chunk():
    assert split_text("Just one short page.") == ["Just one short page."]


def test_chunks_respect_target_and_overlap():
    sentences = [f"Sentence number {i} is here." for i in range(40)]
    p = ChunkingParams(target_chars=100, overlap_chars=20, max_overhang=20)

    chunks = pack_sentences(sentences, p)

    assert len(chunks) > 1
    assert all(len(c) <= p.target_chars + p.max_overhang + p.overlap_chars + 1 for c in chunks)
    # each chunk starts with the tail of the previous one
    for prev, nxt in zip(chunks, chunks[1:]):
        assert nxt.startswith(prev[-p.overlap_chars :])


def test_sentence_without_punctuation_is_hard_split():
    p = ChunkingParams(target_chars=50, overlap_chars=0, max_overhang=0)

    chunks = pack_sentences(["x" * 120], p)

    assert [len(c) for c in chunks] == [50, 50, 20]


def test_invalid_params_rejected():
    with pytest.raises(ValueError):
        ChunkingParams(target_chars=0)
    with pytest.raises(ValueError):
        ChunkingParams(target_chars=100, overlap_chars=100)
