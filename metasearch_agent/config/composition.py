from metasearch_agent.application.dto.agent_config import AgentConfig
from metasearch_agent.application.ports.clock_port import ClockPort
from metasearch_agent.application.ports.embedding_port import EmbeddingPort
from metasearch_agent.application.ports.file_store_port import FileStorePort
from metasearch_agent.application.ports.link_extractor_port import LinkExtractorPort
from metasearch_agent.application.ports.llm_port import LLMPort
from metasearch_agent.application.ports.search_port import SearchPort
from metasearch_agent.application.ports.telemetry_port import NullTelemetry, TelemetryPort
from metasearch_agent.application.use_cases.answer_query import AnswerQuery
from metasearch_agent.config.prompts import get_focus_preset
from metasearch_agent.config.settings import AppSettings
from metasearch_agent.infrastructure.embeddings.hf_sentence_transformers import HFEmbeddingAdapter
from metasearch_agent.infrastructure.extraction.link_extractor import HttpLinkExtractor
from metasearch_agent.infrastructure.files.json_file_store import JsonFileStore
from metasearch_agent.infrastructure.llm.openai_adapter import OpenAIChatAdapter
from metasearch_agent.infrastructure.search.searxng_adapter import SearxNGSearchAdapter
from metasearch_agent.infrastructure.telemetry.otel_adapter import OpenTelemetryAdapter, OtelConfig
from metasearch_agent.infrastructure.time.system_clock import SystemClock


def build_llm(settings: AppSettings) -> LLMPort:
    return OpenAIChatAdapter(
        base_url=settings.llm_base_url,
        api_key=settings.llm_api_key,
        model=settings.llm_model,
        timeout_s=settings.llm_timeout_s,
    )


def build_embedding(settings: AppSettings) -> EmbeddingPort | None:
    """Build the embedding adapter, or None when reranking by similarity is off.

    Without an embedding provider the reranker truncates sources unranked.
    """
    if not settings.embeddings_enabled:
        return None
    return HFEmbeddingAdapter(
        model_name=settings.embedding_model,
        device=settings.embedding_device,
    )


def build_search(settings: AppSettings) -> SearchPort:
    return SearxNGSearchAdapter(
        base_url=settings.searxng_url,
        timeout_s=settings.search_timeout_s,
    )


def build_extractor(settings: AppSettings) -> LinkExtractorPort:
    return HttpLinkExtractor(timeout_s=settings.fetch_timeout_s)


def build_file_store(settings: AppSettings) -> FileStorePort:
    return JsonFileStore(upload_dir=settings.upload_dir)


def build_clock() -> ClockPort:
    """Build clock adapter for the answer prompt's date.

    Note:
        Tests should inject a fixed clock instead.
    """
    return SystemClock()


def build_telemetry(settings: AppSettings) -> TelemetryPort:
    if not settings.telemetry_enabled:
        return NullTelemetry()
    return OpenTelemetryAdapter(
        OtelConfig(
            otlp_endpoint=settings.otlp_endpoint or None,
            environment=settings.telemetry_environment,
        )
    )


def build_agent_config(settings: AppSettings, focus: str = "web") -> AgentConfig:
    """Combine a focus-mode preset with environment settings.

    RERANK_THRESHOLD, when set, overrides the preset threshold.
    """
    preset = get_focus_preset(focus)
    threshold = (
        preset.rerank_threshold
        if settings.rerank_threshold is None
        else settings.rerank_threshold
    )
    return AgentConfig(
        query_rewrite_prompt=preset.query_rewrite_prompt,
        answer_prompt=preset.answer_prompt,
        search_enabled=preset.search_enabled,
        rerank_enabled=preset.rerank_enabled,
        summarizer_enabled=settings.summarizer_enabled,
        rerank_threshold=threshold,
        active_engines=preset.active_engines,
        default_max_sources=settings.max_sources,
    )


def build_answer_use_case(focus: str = "web", settings: AppSettings | None = None) -> AnswerQuery:
    """Build the AnswerQuery use case for one focus mode.

    Raises:
        ValueError: unknown focus mode
    """
    settings = settings or AppSettings()
    return AnswerQuery(
        config=build_agent_config(settings, focus),
        llm=build_llm(settings),
        search=build_search(settings),
        extractor=build_extractor(settings),
        file_store=build_file_store(settings),
        embedding=build_embedding(settings),
        clock=build_clock(),
        telemetry=build_telemetry(settings),
    )
