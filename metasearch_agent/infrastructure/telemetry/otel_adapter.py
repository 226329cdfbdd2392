"""OpenTelemetry adapter for answer-pipeline metrics.

Counters track request outcomes; histograms track latency and how many
sources each answer cites. Without opentelemetry-sdk the adapter is a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import import_module
from typing import Any

from metasearch_agent.application.ports.telemetry_port import TelemetryPort

logger = logging.getLogger(__name__)


@dataclass
class OtelConfig:
    service_name: str = "metasearch-agent"
    otlp_endpoint: str | None = None  # e.g., "http://localhost:4317"
    environment: str = "production"
    enable_console: bool = False


class OpenTelemetryAdapter(TelemetryPort):
    """Lazily creates one instrument per metric name.

    Examples:
        - incr("agent.requests.total", {"status": "done", "mode": "speed"})
        - observe("agent.request.latency_ms", 812.5, {"status": "done", "mode": "speed"})
        - observe("agent.sources.count", 6, {"mode": "balanced"})
    """

    def __init__(self, cfg: OtelConfig) -> None:
        self._cfg = cfg
        self._meter: Any | None = None
        self._counters: dict[str, Any] = {}
        self._histograms: dict[str, Any] = {}
        self._init_otel()

    @property
    def enabled(self) -> bool:
        return self._meter is not None

    def _init_otel(self) -> None:
        try:
            otel_sdk = import_module("opentelemetry.sdk.metrics")
            otel_export = import_module("opentelemetry.sdk.metrics.export")
            otel_metrics = import_module("opentelemetry.metrics")
            otel_resources = import_module("opentelemetry.sdk.resources")
        except ImportError:
            logger.info("opentelemetry-sdk not installed; metrics disabled")
            return

        resource = otel_resources.Resource.create(
            {
                "service.name": self._cfg.service_name,
                "deployment.environment": self._cfg.environment,
            }
        )

        readers = []
        if self._cfg.otlp_endpoint:
            otel_otlp = import_module("opentelemetry.exporter.otlp.proto.grpc.metric_exporter")
            exporter = otel_otlp.OTLPMetricExporter(endpoint=self._cfg.otlp_endpoint)
            readers.append(otel_export.PeriodicExportingMetricReader(exporter))
        if self._cfg.enable_console:
            readers.append(
                otel_export.PeriodicExportingMetricReader(otel_export.ConsoleMetricExporter())
            )

        provider = otel_sdk.MeterProvider(resource=resource, metric_readers=readers)
        otel_metrics.set_meter_provider(provider)
        self._meter = otel_metrics.get_meter(__name__)

    def incr(self, name: str, tags: dict) -> None:
        if self._meter is None:
            return
        if name not in self._counters:
            self._counters[name] = self._meter.create_counter(
                name=name, description=f"Counter for {name}"
            )
        self._counters[name].add(1, attributes=tags)

    def observe(self, name: str, value: float, tags: dict) -> None:
        if self._meter is None:
            return
        if name not in self._histograms:
            self._histograms[name] = self._meter.create_histogram(
                name=name, description=f"Histogram for {name}"
            )
        self._histograms[name].record(value, attributes=tags)
