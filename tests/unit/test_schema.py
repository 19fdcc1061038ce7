# Copyright (c) 2026 Vision Contributors. All Rights Reserved.
"""Unit tests for the snapshot schema."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from vision.protocols.schema import (
    DatabaseStats,
    ErrorLog,
    MonitoringResponse,
    RequestStats,
    SystemStats,
)


def _response(**kwargs) -> MonitoringResponse:
    return MonitoringResponse(
        requests=RequestStats(total=4, errors=1, success_rate=75.0, avg_latency_ms=12.0),
        database=DatabaseStats(total_queries=2, errors=0, avg_latency_ms=3.5),
        system=SystemStats(cpu_usage=10.0, memory_usage=55.5, network_recv=0.25),
        **kwargs,
    )


class TestErrorLog:
    def test_defaults(self):
        entry = ErrorLog(timestamp=datetime.now(timezone.utc), error="boom")
        assert entry.method == ""
        assert entry.path == ""

    def test_immutable(self):
        entry = ErrorLog(timestamp=datetime.now(timezone.utc), error="boom")
        with pytest.raises(ValidationError):
            entry.error = "changed"


class TestMonitoringResponse:
    def test_to_dict_uses_camel_case(self):
        data = _response().to_dict()
        assert data["requests"] == {
            "total": 4, "errors": 1, "successRate": 75.0, "avgLatencyMs": 12.0,
        }
        assert data["database"] == {"totalQueries": 2, "errors": 0, "avgLatencyMs": 3.5}
        assert data["system"] == {"cpuUsage": 10.0, "memoryUsage": 55.5, "networkRecv": 0.25}
        assert "lastErrors" not in data

    def test_to_dict_serializes_errors(self):
        ts = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        data = _response(last_errors=[ErrorLog(timestamp=ts, method="GET", path="/a", error="x")]).to_dict()
        assert data["lastErrors"] == [
            {"timestamp": "2026-01-02T03:04:05Z", "method": "GET", "path": "/a", "error": "x"}
        ]

    def test_accepts_aliases(self):
        stats = RequestStats.model_validate(
            {"total": 1, "errors": 0, "successRate": 100.0, "avgLatencyMs": 1.0}
        )
        assert stats.success_rate == 100.0
