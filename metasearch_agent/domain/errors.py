"""Domain errors (typed) for the answering pipeline.

Adapters translate third-party exceptions into this family so the
application layer never sees httpx/openai/pypdf specifics.
"""

from dataclasses import dataclass


class DomainError(Exception):
    """Base class for domain-specific errors."""


class ValidationError(DomainError):
    """Invalid input/domain state."""


class RetrievalError(DomainError):
    """Generic retrieval failure (after infra errors were mapped)."""


class LLMError(DomainError):
    """LLM backend failed or is misconfigured."""


class EmbeddingError(DomainError):
    """Embedding backend failed or is misconfigured."""


class SearchError(DomainError):
    """Web search backend failed or returned an unusable payload."""


class ExtractionError(DomainError):
    """Link extraction failed for the whole batch."""


@dataclass(frozen=True)
class FileStoreError(DomainError):
    """Precomputed content/embeddings for an uploaded file are missing or corrupt."""

    file_id: str
    detail: str = ""

    def __str__(self) -> str:
        return f"file '{self.file_id}': {self.detail}" if self.detail else f"file '{self.file_id}'"
