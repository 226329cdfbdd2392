from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from metasearch_agent.application.ports.embedding_port import EmbeddingPort
from metasearch_agent.domain.errors import EmbeddingError

# Module attribute so tests can swap in a fake model class
SentenceTransformer: Any | None
try:  # pragma: no cover - exercised via tests with monkeypatch
    from sentence_transformers import SentenceTransformer as _SentenceTransformer
except Exception:  # noqa: BLE001
    SentenceTransformer = None
else:  # pragma: no cover - exercised in integration
    SentenceTransformer = _SentenceTransformer


@dataclass
class HFEmbeddingAdapter(EmbeddingPort):
    """Sentence-Transformers embeddings for reranking, L2-normalized.

    The model is loaded on first use. Instruction-tuned models (e5, bge) want
    different prefixes for queries and passages; symmetric models need none.
    """

    model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    device: str = "cpu"
    query_prefix: str = ""
    passage_prefix: str = ""
    local_files_only: bool = False
    _model: Any | None = field(default=None, repr=False)

    def _load(self) -> Any:
        if self._model is None:
            if SentenceTransformer is None:
                raise EmbeddingError("sentence-transformers is not installed")
            try:
                self._model = SentenceTransformer(
                    self.model_name,
                    device=self.device,
                    local_files_only=self.local_files_only,
                )
            except Exception as ex:  # noqa: BLE001
                raise EmbeddingError(f"cannot load embedding model '{self.model_name}': {ex}") from ex
        return self._model

    def _encode(self, inputs: str | list[str], what: str) -> Any:
        model = self._load()
        try:
            return model.encode(
                inputs,
                normalize_embeddings=True,
                convert_to_numpy=True,
                show_progress_bar=False,
            )
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingError(f"embedding {what} failed: {ex}") from ex

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        rows = self._encode([self.passage_prefix + t for t in texts], "documents")
        return [[float(x) for x in row] for row in rows]

    def embed_query(self, text: str) -> list[float]:
        return [float(x) for x in self._encode(self.query_prefix + text, "query")]
