import pytest

from metasearch_agent.application.use_cases.rerank_documents import RerankDocuments
from metasearch_agent.domain.errors import FileStoreError
from metasearch_agent.domain.models import Document, DocumentMetadata, UploadedFile
from metasearch_agent.domain.types import OptimizationMode as Mode


def _unit(x: float) -> list[float]:
    """2-d unit vector whose cosine with (1, 0) is ``x``."""
    return [x, (1.0 - x * x) ** 0.5]


class FakeEmbedding:
    """Looks up a canned similarity by document text; the query maps to (1, 0)."""

    def __init__(self, scores: dict[str, float] | None = None) -> None:
        self.scores = scores or {}
        self.text_calls: list[list[str]] = []
        self.query_calls: list[str] = []

    def embed_texts(self, texts):
        self.text_calls.append(list(texts))
        return [_unit(self.scores.get(t, 0.0)) for t in texts]

    def embed_query(self, text):
        self.query_calls.append(text)
        return [1.0, 0.0]


class FakeFileStore:
    def __init__(self, files: dict[str, UploadedFile] | None = None) -> None:
        self.files = files or {}
        self.loaded: list[str] = []

    def load(self, file_id):
        self.loaded.append(file_id)
        if file_id not in self.files:
            raise FileStoreError(file_id, "missing")
        return self.files[file_id]


def _doc(text: str, url: str | None = None) -> Document:
    return Document(content=text, metadata=DocumentMetadata(title=text, url=url or f"https://{text}"))


def _file(file_id: str, scores: list[float]) -> UploadedFile:
    return UploadedFile(
        file_id=file_id,
        title=f"{file_id}.pdf",
        chunks=tuple(f"{file_id}-chunk{i}" for i in range(len(scores))),
        embeddings=tuple(tuple(_unit(s)) for s in scores),
    )


def _reranker(embedding=None, files=None, **kw) -> RerankDocuments:
    return RerankDocuments(file_store=FakeFileStore(files), embedding=embedding, **kw)


@pytest.mark.asyncio
async def test_nothing_to_rank_returns_input():
    emb = FakeEmbedding()
    out = await _reranker(emb).execute("q", [], (), Mode.BALANCED, 15)
    assert out == []
    assert emb.query_calls == []


@pytest.mark.asyncio
async def test_speed_mode_without_files_keeps_search_order():
    docs = [_doc(f"d{i}") for i in range(10)]
    emb = FakeEmbedding()

    out = await _reranker(emb).execute("q", docs, (), Mode.SPEED, 5)

    assert out == docs[:5]
    assert emb.text_calls == []


@pytest.mark.asyncio
async def test_balanced_mode_ranks_and_applies_threshold():
    docs = [_doc("a"), _doc("b"), _doc("c")]
    emb = FakeEmbedding({"a": 0.1, "b": 0.4, "c": 0.9})

    out = await _reranker(emb, rerank_threshold=0.3).execute("q", docs, (), Mode.BALANCED, 15)

    assert [d.content for d in out] == ["c", "b"]


@pytest.mark.asyncio
async def test_quality_mode_ranks_like_balanced():
    docs = [_doc("a"), _doc("b"), _doc("c")]
    emb = FakeEmbedding({"a": 0.5, "b": 0.9, "c": 0.2})
    reranker = _reranker(emb)

    balanced = await reranker.execute("q", docs, (), Mode.BALANCED, 15)
    quality = await reranker.execute("q", docs, (), Mode.QUALITY, 15)

    assert balanced == quality
    assert [d.content for d in quality] == ["b", "a"]


@pytest.mark.asyncio
async def test_balanced_limit_is_min_of_request_and_agent_max():
    docs = [_doc(f"d{i}") for i in range(20)]
    emb = FakeEmbedding({f"d{i}": 0.9 - i * 0.01 for i in range(20)})

    out = await _reranker(emb, max_sources=4).execute("q", docs, (), Mode.BALANCED, 10)
    assert len(out) == 4

    out = await _reranker(emb, max_sources=15).execute("q", docs, (), Mode.BALANCED, 3)
    assert [d.content for d in out] == ["d0", "d1", "d2"]


@pytest.mark.asyncio
async def test_balanced_ranks_file_chunks_with_web_docs():
    docs = [_doc("web-low"), _doc("web-high")]
    emb = FakeEmbedding({"web-low": 0.35, "web-high": 0.8})
    files = {"f1": _file("f1", [0.6, 0.1])}

    out = await _reranker(emb, files=files).execute("q", docs, ("f1",), Mode.BALANCED, 15)

    assert [d.content for d in out] == ["web-high", "f1-chunk0", "web-low"]
    assert out[1].url == "File"
    assert out[1].title == "f1.pdf"


@pytest.mark.asyncio
async def test_speed_mode_caps_file_chunks_at_eight_when_web_present():
    files = {"f1": _file("f1", [0.9 - i * 0.01 for i in range(12)])}
    web = [_doc(f"w{i}") for i in range(10)]

    out = await _reranker(FakeEmbedding(), files=files).execute(
        "q", web, ("f1",), Mode.SPEED, 15
    )

    assert [d.url for d in out[:8]] == ["File"] * 8
    assert [d.content for d in out[8:]] == [f"w{i}" for i in range(7)]


@pytest.mark.asyncio
async def test_speed_mode_files_only_use_full_limit():
    files = {"f1": _file("f1", [0.9 - i * 0.01 for i in range(12)])}

    out = await _reranker(FakeEmbedding(), files=files).execute("q", [], ("f1",), Mode.SPEED, 10)

    assert len(out) == 10
    assert all(d.url == "File" for d in out)


@pytest.mark.asyncio
async def test_rerank_disabled_behaves_like_speed():
    docs = [_doc("a"), _doc("b")]
    emb = FakeEmbedding({"a": 0.1, "b": 0.9})

    out = await _reranker(emb, rerank_enabled=False).execute("q", docs, (), Mode.BALANCED, 15)

    assert out == docs


@pytest.mark.asyncio
async def test_summarize_query_truncates_without_ranking():
    docs = [_doc(f"d{i}") for i in range(6)]
    emb = FakeEmbedding()

    out = await _reranker(emb).execute("Summarize", docs, (), Mode.QUALITY, 4)

    assert out == docs[:4]
    assert emb.query_calls == []


@pytest.mark.asyncio
async def test_without_embeddings_returns_docs_with_content():
    docs = [_doc("a"), Document(content="", metadata=DocumentMetadata("empty", "u")), _doc("b")]

    out = await _reranker(None).execute("q", docs, (), Mode.BALANCED, 15)

    assert [d.content for d in out] == ["a", "b"]


@pytest.mark.asyncio
async def test_missing_file_is_fatal():
    with pytest.raises(FileStoreError):
        await _reranker(FakeEmbedding()).execute("q", [_doc("a")], ("nope",), Mode.SPEED, 5)


@pytest.mark.asyncio
async def test_rerank_is_idempotent_on_its_output():
    docs = [_doc("a"), _doc("b"), _doc("c"), _doc("d")]
    emb = FakeEmbedding({"a": 0.5, "b": 0.9, "c": 0.2, "d": 0.7})
    reranker = _reranker(emb)

    once = await reranker.execute("q", docs, (), Mode.BALANCED, 15)
    twice = await reranker.execute("q", once, (), Mode.BALANCED, 15)

    assert once == twice


def _file_with_vectors(file_id: str, vectors: list[tuple[float, ...]]) -> UploadedFile:
    return UploadedFile(
        file_id=file_id,
        title=f"{file_id}.pdf",
        chunks=tuple(f"{file_id}-chunk{i}" for i in range(len(vectors))),
        embeddings=tuple(vectors),
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("mode", [Mode.SPEED, Mode.BALANCED])
async def test_file_embeddings_of_wrong_size_fail_the_request(mode):
    files = {"f": _file_with_vectors("f", [(1.0,), (0.5,)])}

    with pytest.raises(FileStoreError) as exc:
        await _reranker(FakeEmbedding(), files).execute("q", [_doc("a")], ("f",), mode, 5)

    assert exc.value.file_id == "f"
    assert "1 dimensions" in exc.value.detail


@pytest.mark.asyncio
async def test_file_embeddings_matching_query_size_are_ranked():
    files = {"f": _file_with_vectors("f", [(1.0, 0.0)])}

    out = await _reranker(FakeEmbedding(), files).execute("q", [], ("f",), Mode.BALANCED, 5)

    assert [d.content for d in out] == ["f-chunk0"]
