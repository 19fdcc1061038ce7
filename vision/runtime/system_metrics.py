# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
System Metrics — Host CPU, memory and network readings.

The aggregator only depends on the SystemMetricsProvider protocol; the
psutil-backed implementation reads the values through native OS APIs.
Every method is blocking and is expected to be called from a worker thread.
"""

from __future__ import annotations

import logging
import time
from typing import Protocol

import psutil

from vision.core.errors import MetricsCollectionError

logger = logging.getLogger("vision.system")

_BYTES_PER_MB = 1024 * 1024


class SystemMetricsProvider(Protocol):
    """Source of host metrics. Each call raises MetricsCollectionError on failure."""

    def cpu_percent(self) -> float: ...

    def memory_percent(self) -> float: ...

    def network_receive_mb(self) -> float: ...


class PsutilMetricsProvider:
    """
    SystemMetricsProvider backed by psutil.

    Args:
        cpu_interval: seconds psutil blocks while sampling CPU usage
            (0 compares against the previous call instead of blocking)
        network_interval: seconds between the two network counter reads
    """

    def __init__(self, cpu_interval: float = 0.5, network_interval: float = 1.0) -> None:
        if network_interval <= 0:
            raise ValueError("network_interval must be positive")
        self._cpu_interval = cpu_interval
        self._network_interval = network_interval

    def cpu_percent(self) -> float:
        try:
            return float(psutil.cpu_percent(interval=self._cpu_interval))
        except (psutil.Error, OSError, RuntimeError) as e:
            raise MetricsCollectionError("CPU usage", str(e)) from e

    def memory_percent(self) -> float:
        try:
            return float(psutil.virtual_memory().percent)
        except (psutil.Error, OSError, RuntimeError) as e:
            raise MetricsCollectionError("memory usage", str(e)) from e

    def network_receive_mb(self) -> float:
        """Received throughput across all interfaces, in MB per second."""
        try:
            before = psutil.net_io_counters()
            time.sleep(self._network_interval)
            after = psutil.net_io_counters()
        except (psutil.Error, OSError, RuntimeError) as e:
            raise MetricsCollectionError("network stats", str(e)) from e

        if before is None or after is None:
            raise MetricsCollectionError("network stats", "no network interfaces found")

        # Counters can wrap or reset when an interface goes away
        received = max(after.bytes_recv - before.bytes_recv, 0)
        rate = received / self._network_interval / _BYTES_PER_MB
        logger.debug("Network receive: %d bytes in %.2fs", received, self._network_interval)
        return rate
