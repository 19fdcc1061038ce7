# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
Stats Aggregator — In-memory request, database and error counters.

One instance is created by the embedding application and passed to whatever
instruments requests and database calls. Update operations are synchronous
and lock-protected so they can be called from the event loop and from
threadpool handlers alike; snapshot() is a coroutine because host metrics
are collected in worker threads.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Deque, Dict, Optional, Union

from vision.core.config import VisionSettings
from vision.core.errors import MetricsCollectionError
from vision.protocols.schema import (
    DatabaseStats,
    ErrorLog,
    MonitoringResponse,
    RequestStats,
    SystemStats,
)
from vision.runtime.system_metrics import PsutilMetricsProvider, SystemMetricsProvider

logger = logging.getLogger("vision.aggregator")

DEFAULT_ERROR_LOG_CAPACITY = 10

METRIC_NAMES = ("cpu", "memory", "network")


@dataclass
class Stats:
    """Mutable counters owned by a single StatsAggregator."""

    request_count: int = 0
    error_count: int = 0
    total_latency: float = 0.0
    db_query_count: int = 0
    db_error_count: int = 0
    db_total_latency: float = 0.0
    last_errors: Deque[ErrorLog] = field(
        default_factory=lambda: deque(maxlen=DEFAULT_ERROR_LOG_CAPACITY)
    )


def _error_message(error: Union[BaseException, str]) -> str:
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)


class StatsAggregator:
    """
    Accumulates request/database counters and a bounded error log.

    Durations are stored in whatever unit the caller passes (the bundled
    middleware and timing helpers use milliseconds). Negative durations are
    accepted but will skew the averages.

    Args:
        provider: source of host CPU/memory/network readings
        error_log_capacity: number of most recent request errors retained
        metrics_timeout: seconds to wait for each host metric; None waits forever
    """

    def __init__(
        self,
        provider: SystemMetricsProvider,
        error_log_capacity: int = DEFAULT_ERROR_LOG_CAPACITY,
        metrics_timeout: Optional[float] = None,
    ) -> None:
        if error_log_capacity < 1:
            raise ValueError("error_log_capacity must be at least 1")
        self._provider = provider
        self._metrics_timeout = metrics_timeout
        self._lock = threading.Lock()
        self._stats = Stats(last_errors=deque(maxlen=error_log_capacity))
        # One worker per metric: a hung read only ever blocks its own metric
        self._executors: Dict[str, ThreadPoolExecutor] = {
            name: ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"vision-{name}")
            for name in METRIC_NAMES
        }
        self._in_flight: Dict[str, Future] = {}

    @classmethod
    def from_settings(cls, settings: VisionSettings) -> "StatsAggregator":
        provider = PsutilMetricsProvider(
            cpu_interval=settings.CPU_SAMPLE_INTERVAL,
            network_interval=settings.NETWORK_SAMPLE_INTERVAL,
        )
        return cls(
            provider,
            error_log_capacity=settings.ERROR_LOG_CAPACITY,
            metrics_timeout=settings.metrics_timeout,
        )

    @property
    def error_log_capacity(self) -> int:
        return self._stats.last_errors.maxlen

    def close(self) -> None:
        """Stop the metric worker threads without waiting for running reads."""
        for executor in self._executors.values():
            executor.shutdown(wait=False, cancel_futures=True)

    # ── Requests ────────────────────────────────────────────────

    def record_request(self, duration: float) -> None:
        """Count one request and add its duration to the total latency."""
        with self._lock:
            self._stats.request_count += 1
            self._stats.total_latency += duration

    def record_error(
        self,
        error: Union[BaseException, str],
        method: Optional[str] = None,
        path: Optional[str] = None,
    ) -> None:
        """
        Count one request error and append it to the recent-error log.

        The log is bounded: once full, the oldest entry is dropped before the
        new one is appended.
        """
        message = _error_message(error)
        with self._lock:
            self._stats.error_count += 1
            # Stamped under the lock so the log stays chronological
            self._stats.last_errors.append(
                ErrorLog(
                    timestamp=datetime.now(timezone.utc),
                    method=method or "",
                    path=path or "",
                    error=message,
                )
            )

    # ── Database ────────────────────────────────────────────────

    def record_db_query(self, duration: float) -> None:
        with self._lock:
            self._stats.db_query_count += 1
            self._stats.db_total_latency += duration

    def record_db_error(self) -> None:
        # Database errors carry no payload and never reach last_errors
        with self._lock:
            self._stats.db_error_count += 1

    # ── Export ──────────────────────────────────────────────────

    def stats(self) -> Stats:
        """Detached copy of the current counters and error log."""
        with self._lock:
            return replace(
                self._stats,
                last_errors=deque(self._stats.last_errors, maxlen=self._stats.last_errors.maxlen),
            )

    async def snapshot(self, include_errors: bool = True) -> MonitoringResponse:
        """
        Combine the counters with freshly collected host metrics.

        The three host metrics are collected concurrently; any one that fails
        or times out is reported as 0 without affecting the others. A read that
        outlives its timeout keeps running on its own worker and is reused by
        the next snapshot instead of being started again.
        """
        cpu_usage, memory_usage, network_recv = await asyncio.gather(
            self._collect("cpu", self._provider.cpu_percent),
            self._collect("memory", self._provider.memory_percent),
            self._collect("network", self._provider.network_receive_mb),
        )

        with self._lock:
            s = self._stats
            request_count = s.request_count
            error_count = s.error_count
            total_latency = s.total_latency
            db_query_count = s.db_query_count
            db_error_count = s.db_error_count
            db_total_latency = s.db_total_latency
            last_errors = list(s.last_errors) if include_errors else None

        return MonitoringResponse(
            requests=RequestStats(
                total=request_count,
                errors=error_count,
                success_rate=(
                    0.0
                    if request_count == 0
                    else (request_count - error_count) / request_count * 100
                ),
                avg_latency_ms=0.0 if request_count == 0 else total_latency / request_count,
            ),
            database=DatabaseStats(
                total_queries=db_query_count,
                errors=db_error_count,
                avg_latency_ms=0.0 if db_query_count == 0 else db_total_latency / db_query_count,
            ),
            system=SystemStats(
                cpu_usage=cpu_usage,
                memory_usage=memory_usage,
                network_recv=network_recv,
            ),
            last_errors=last_errors,
        )

    def _read_future(self, metric: str, reader: Callable[[], float]) -> Future:
        # A read still running from an earlier snapshot is awaited again
        # rather than queueing a second one behind it.
        future = self._in_flight.get(metric)
        if future is None or future.done():
            future = self._executors[metric].submit(reader)
            self._in_flight[metric] = future
        return future

    async def _collect(self, metric: str, reader: Callable[[], float]) -> float:
        try:
            future = self._read_future(metric, reader)
            return await asyncio.wait_for(asyncio.wrap_future(future), timeout=self._metrics_timeout)
        except MetricsCollectionError as e:
            logger.warning("Error getting %s metric: %s", metric, e, extra={"metric": metric})
        except asyncio.TimeoutError:
            logger.warning(
                "Timed out after %.1fs getting %s metric",
                self._metrics_timeout, metric,
                extra={"metric": metric},
            )
        except Exception:
            logger.exception("Unexpected failure getting %s metric", metric, extra={"metric": metric})
        return 0.0
