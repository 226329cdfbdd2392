"""Application settings with environment-driven configuration.

This is the ONLY place where environment variables are read. All other
layers receive settings via dependency injection.
"""

import os
from dataclasses import dataclass, field


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AppSettings:
    """Application settings loaded from environment variables.

    Feature Flags:
    - embeddings_enabled: load the local embedding model for reranking
      (off = unranked truncation)
    - summarizer_enabled: parse the rewritten question and summarize long pages
    - telemetry_enabled: export OpenTelemetry metrics
    """

    # ===== LLM Configuration =====
    llm_base_url: str = field(
        default_factory=lambda: os.getenv("LLM_BASE_URL", "http://localhost:8000/v1")
    )
    llm_api_key: str = field(default_factory=lambda: os.getenv("LLM_API_KEY", "EMPTY"))
    llm_model: str = field(
        default_factory=lambda: os.getenv("LLM_MODEL", "meta-llama/Meta-Llama-3.1-8B-Instruct")
    )
    llm_timeout_s: float = field(default_factory=lambda: float(os.getenv("LLM_TIMEOUT_S", "60")))

    # ===== Embedding Configuration =====
    embeddings_enabled: bool = field(default_factory=lambda: _flag("EMBEDDINGS_ENABLED", "true"))
    embedding_model: str = field(
        default_factory=lambda: os.getenv(
            "EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2"
        )
    )
    embedding_device: str = field(default_factory=lambda: os.getenv("EMBEDDING_DEVICE", "cpu"))
    # Supported: "cpu" | "cuda" | "mps"

    # ===== Search / Fetch Configuration =====
    searxng_url: str = field(
        default_factory=lambda: os.getenv("SEARXNG_URL", "http://localhost:8080")
    )
    search_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("SEARCH_TIMEOUT_S", "15"))
    )
    fetch_timeout_s: float = field(default_factory=lambda: float(os.getenv("FETCH_TIMEOUT_S", "10")))

    # ===== Uploaded Files =====
    upload_dir: str = field(default_factory=lambda: os.getenv("UPLOAD_DIR", "uploads"))

    # ===== Answering =====
    rerank_threshold: float | None = field(
        default_factory=lambda: float(os.environ["RERANK_THRESHOLD"])
        if os.getenv("RERANK_THRESHOLD")
        else None
    )
    # None = use the focus mode's threshold
    max_sources: int = field(default_factory=lambda: int(os.getenv("MAX_SOURCES", "15")))
    summarizer_enabled: bool = field(default_factory=lambda: _flag("SUMMARIZER_ENABLED", "true"))

    # ===== Logging =====
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())

    # ===== Telemetry Configuration =====
    telemetry_enabled: bool = field(default_factory=lambda: _flag("TELEMETRY_ENABLED", "false"))
    otlp_endpoint: str = field(default_factory=lambda: os.getenv("OTLP_ENDPOINT", ""))
    # Empty string = no OTLP export
    telemetry_environment: str = field(
        default_factory=lambda: os.getenv("TELEMETRY_ENVIRONMENT", "production")
    )
