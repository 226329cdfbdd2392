"""Application ports package.

Re-exports the ports so use cases can import them from one place.
"""

from metasearch_agent.application.ports.clock_port import ClockPort
from metasearch_agent.application.ports.embedding_port import EmbeddingPort
from metasearch_agent.application.ports.file_store_port import FileStorePort
from metasearch_agent.application.ports.link_extractor_port import LinkExtractorPort
from metasearch_agent.application.ports.llm_port import ChatMessage, LLMPort, LLMResponse
from metasearch_agent.application.ports.search_port import SearchPort
from metasearch_agent.application.ports.telemetry_port import NullTelemetry, TelemetryPort

__all__ = [
    "ClockPort",
    "EmbeddingPort",
    "FileStorePort",
    "LinkExtractorPort",
    "LLMPort",
    "ChatMessage",
    "LLMResponse",
    "SearchPort",
    "TelemetryPort",
    "NullTelemetry",
]
