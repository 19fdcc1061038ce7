# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
Shared test fixtures for all Vision tests.
"""

import time
from typing import Iterable, Optional

import pytest

from vision.core.aggregator import StatsAggregator
from vision.core.errors import MetricsCollectionError


class FakeMetricsProvider:
    """Deterministic SystemMetricsProvider; metrics named in `failing` raise."""

    def __init__(
        self,
        cpu: float = 12.5,
        memory: float = 40.0,
        network: float = 1.5,
        failing: Iterable[str] = (),
        delays: Optional[dict] = None,
    ):
        self.values = {"cpu": cpu, "memory": memory, "network": network}
        self.failing = set(failing)
        self.delays = delays or {}
        self.calls: list[str] = []

    def _read(self, name: str) -> float:
        self.calls.append(name)
        if self.delays.get(name):
            time.sleep(self.delays[name])
        if name in self.failing:
            raise MetricsCollectionError(name, "unavailable")
        return self.values[name]

    def cpu_percent(self) -> float:
        return self._read("cpu")

    def memory_percent(self) -> float:
        return self._read("memory")

    def network_receive_mb(self) -> float:
        return self._read("network")


@pytest.fixture
def fake_provider() -> FakeMetricsProvider:
    return FakeMetricsProvider()


@pytest.fixture
def aggregator(fake_provider) -> StatsAggregator:
    return StatsAggregator(fake_provider)


@pytest.fixture
def make_provider():
    """Factory for FakeMetricsProvider with custom values or failures."""
    return FakeMetricsProvider
