from metasearch_agent.domain.models import Document, DocumentMetadata
from metasearch_agent.domain.services.normalization import group_chunks_by_url

import pytest


def _chunk(url: str, text: str, title: str = "Page") -> Document:
    return Document(content=text, metadata=DocumentMetadata(title=title, url=url))


def test_chunks_of_one_url_are_joined_with_blank_line():
    docs = group_chunks_by_url([_chunk("u1", "a"), _chunk("u1", "b"), _chunk("u1", "c")])

    assert len(docs) == 1
    assert docs[0].content == "a\n\nb\n\nc"
    assert docs[0].metadata.merged_chunk_count == 3


def test_first_appearance_order_is_kept():
    docs = group_chunks_by_url(
        [_chunk("u1", "a"), _chunk("u2", "x"), _chunk("u1", "b"), _chunk("u3", "y")]
    )

    assert [d.url for d in docs] == ["u1", "u2", "u3"]
    assert docs[0].content == "a\n\nb"


def test_group_is_capped_at_ten_chunks():
    chunks = [_chunk("u1", f"c{i}") for i in range(11)]

    docs = group_chunks_by_url(chunks)

    assert len(docs) == 2
    assert docs[0].metadata.merged_chunk_count == 10
    assert docs[0].content.split("\n\n") == [f"c{i}" for i in range(10)]
    # the 11th chunk opens a new logical document for the same URL
    assert docs[1].content == "c10"
    assert docs[1].metadata.merged_chunk_count == 1
    assert docs[1].url == "u1"


def test_twenty_five_chunks_make_three_documents():
    docs = group_chunks_by_url([_chunk("u1", str(i)) for i in range(25)])

    assert [d.metadata.merged_chunk_count for d in docs] == [10, 10, 5]


def test_titles_override_page_titles():
    docs = group_chunks_by_url(
        [_chunk("u1", "a", title="<title> junk"), _chunk("u2", "b", title="Kept")],
        titles={"u1": "Search Title"},
    )

    assert docs[0].title == "Search Title"
    assert docs[1].title == "Kept"


def test_empty_input():
    assert group_chunks_by_url([]) == []


def test_invalid_cap_rejected():
    with pytest.raises(ValueError):
        group_chunks_by_url([_chunk("u1", "a")], max_chunks=0)
