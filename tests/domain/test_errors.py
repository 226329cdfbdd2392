from metasearch_agent.domain.errors import (
    DomainError,
    EmbeddingError,
    ExtractionError,
    FileStoreError,
    LLMError,
    RetrievalError,
    SearchError,
    ValidationError,
)


def test_error_family_shares_domain_base():
    for cls in (
        ValidationError,
        RetrievalError,
        LLMError,
        EmbeddingError,
        SearchError,
        ExtractionError,
    ):
        assert issubclass(cls, DomainError)
    assert isinstance(FileStoreError("f1"), DomainError)


def test_file_store_error_message():
    assert str(FileStoreError("f1", "missing f1-embeddings.json")) == (
        "file 'f1': missing f1-embeddings.json"
    )
    assert str(FileStoreError("f1")) == "file 'f1'"
