import inspect
from datetime import UTC

import pytest

from metasearch_agent.application.ports.clock_port import ClockPort
from metasearch_agent.infrastructure.time import system_clock


def test_only_one_clock_implementation():
    impls = [
        cls
        for _, cls in inspect.getmembers(system_clock, inspect.isclass)
        if issubclass(cls, ClockPort) and cls is not ClockPort
    ]
    assert [c.__name__ for c in impls] == ["SystemClock"]


def test_clock_port_is_abstract():
    with pytest.raises(TypeError):
        ClockPort()  # type: ignore[abstract]


def test_system_clock_returns_utc():
    now = system_clock.SystemClock().now()
    assert now.tzinfo == UTC
