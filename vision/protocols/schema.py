# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
Vision Schema — Error log entries and the monitoring snapshot.

Attributes are snake_case in Python; the serialized form uses the camelCase
field names consumers of the stats endpoint expect (successRate,
avgLatencyMs, totalQueries, ...).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class _FrozenModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }


class ErrorLog(_FrozenModel):
    """One recorded request failure."""

    timestamp: datetime = Field(..., description="UTC time the error was recorded")
    method: str = Field(default="", description="HTTP method, empty if unknown")
    path: str = Field(default="", description="Request path, empty if unknown")
    error: str = Field(..., description="Message text of the failure")


class RequestStats(_FrozenModel):
    total: int = Field(..., ge=0)
    errors: int = Field(..., ge=0)
    success_rate: float = Field(..., description="Percentage of requests without error")
    avg_latency_ms: float


class DatabaseStats(_FrozenModel):
    total_queries: int = Field(..., ge=0)
    errors: int = Field(..., ge=0)
    avg_latency_ms: float


class SystemStats(_FrozenModel):
    cpu_usage: float = Field(default=0.0, description="Host CPU usage, percent")
    memory_usage: float = Field(default=0.0, description="Host memory usage, percent")
    network_recv: float = Field(default=0.0, description="Network receive rate, MB/s")


class MonitoringResponse(_FrozenModel):
    """
    Point-in-time snapshot of the aggregated counters plus host metrics.

    Built fresh on every snapshot call and never stored by the aggregator.
    """

    requests: RequestStats
    database: DatabaseStats
    system: SystemStats
    last_errors: Optional[List[ErrorLog]] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys; lastErrors omitted when absent."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
