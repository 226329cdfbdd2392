import pytest

from metasearch_agent.application.ports.telemetry_port import NullTelemetry
from metasearch_agent.infrastructure.telemetry.otel_adapter import OpenTelemetryAdapter, OtelConfig


class _Instrument:
    def __init__(self) -> None:
        self.records: list[tuple[float, dict]] = []

    def add(self, value, attributes=None):
        self.records.append((value, attributes))

    def record(self, value, attributes=None):
        self.records.append((value, attributes))


class _FakeMeter:
    def __init__(self) -> None:
        self.counters: dict[str, _Instrument] = {}
        self.histograms: dict[str, _Instrument] = {}

    def create_counter(self, name, description=""):
        return self.counters.setdefault(name, _Instrument())

    def create_histogram(self, name, description=""):
        return self.histograms.setdefault(name, _Instrument())


@pytest.fixture
def adapter(monkeypatch):
    monkeypatch.setattr(OpenTelemetryAdapter, "_init_otel", lambda self: None)
    return OpenTelemetryAdapter(OtelConfig())


def test_without_meter_everything_is_a_no_op(adapter):
    assert not adapter.enabled
    adapter.incr("agent.requests.total", {"status": "done"})
    adapter.observe("agent.request.latency_ms", 1.0, {})


def test_instruments_are_created_once_per_name(adapter):
    meter = _FakeMeter()
    adapter._meter = meter

    adapter.incr("agent.requests.total", {"status": "done"})
    adapter.incr("agent.requests.total", {"status": "failed"})
    adapter.observe("agent.sources.count", 6, {"mode": "speed"})

    assert adapter.enabled
    assert meter.counters["agent.requests.total"].records == [
        (1, {"status": "done"}),
        (1, {"status": "failed"}),
    ]
    assert meter.histograms["agent.sources.count"].records == [(6, {"mode": "speed"})]


def test_null_telemetry_accepts_everything():
    sink = NullTelemetry()
    assert sink.incr("x", {}) is None
    assert sink.observe("x", 1.0, {}) is None
