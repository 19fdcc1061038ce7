# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
API Middleware — Request counting, latency and error recording.
"""

from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from vision.core.aggregator import StatsAggregator

logger = logging.getLogger("vision.api")


class VisionMiddleware(BaseHTTPMiddleware):
    """
    Feeds every HTTP request into a StatsAggregator.

    Each request is counted with its latency in milliseconds. An exception
    escaping the handler is recorded as an error and re-raised; a response
    with status >= error_status_threshold is recorded as an "HTTP <status>"
    error.

    Latency is taken when the handler returns its response. For a
    StreamingResponse that is before the body is sent, so streaming time is
    not included.
    """

    def __init__(
        self,
        app: ASGIApp,
        aggregator: StatsAggregator,
        error_status_threshold: int = 500,
        excluded_paths: Optional[Iterable[str]] = None,
    ) -> None:
        super().__init__(app)
        self.aggregator = aggregator
        self.error_status_threshold = error_status_threshold
        self.excluded_paths = frozenset(excluded_paths or ())

    async def dispatch(self, request: Request, call_next):
        method, path = request.method, request.url.path
        if path in self.excluded_paths:
            return await call_next(request)

        start = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception as e:
            elapsed = (time.perf_counter() - start) * 1000
            self.aggregator.record_request(elapsed)
            self.aggregator.record_error(e, method=method, path=path)
            logger.error(
                "[api] %s %s raised %s (%.0fms)",
                method, path, type(e).__name__, elapsed,
                extra={"method": method, "path": path},
            )
            raise

        elapsed = (time.perf_counter() - start) * 1000
        self.aggregator.record_request(elapsed)
        if response.status_code >= self.error_status_threshold:
            self.aggregator.record_error(f"HTTP {response.status_code}", method=method, path=path)

        logger.info(
            "[api] %s %s → %d (%.0fms)",
            method, path, response.status_code, elapsed,
            extra={"method": method, "path": path},
        )
        return response
