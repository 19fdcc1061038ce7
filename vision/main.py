# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
Vision Application Entry Point.

FastAPI app exposing the stats snapshot, with request tracking middleware.
Embedding applications normally build their own app and only reuse
VisionMiddleware and the observability router; create_app() wires both
around an explicitly constructed StatsAggregator.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from vision.api.middleware import VisionMiddleware
from vision.api.observability import router as observability_router
from vision.core.aggregator import StatsAggregator
from vision.core.config import VisionSettings, settings as default_settings
from vision.core.logging import setup_logging

logger = logging.getLogger("vision.main")


def create_app(
    aggregator: Optional[StatsAggregator] = None,
    settings: Optional[VisionSettings] = None,
) -> FastAPI:
    """Build the FastAPI app around `aggregator` (one is created from settings if omitted)."""
    settings = settings or default_settings
    owns_aggregator = aggregator is None
    aggregator = aggregator or StatsAggregator.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL, replace_handlers=settings.LOG_REPLACE_HANDLERS)
        logger.info(
            "[Vision] Ready (env=%s, error_log_capacity=%d)",
            settings.ENV, aggregator.error_log_capacity,
        )
        yield
        if owns_aggregator:
            aggregator.close()
        logger.info("[Vision] Shutdown complete")

    app = FastAPI(
        title="Vision",
        description="In-process request, database and host metrics",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.vision = aggregator

    # ── Middleware ───────────────────────────────────────────────
    app.add_middleware(
        VisionMiddleware,
        aggregator=aggregator,
        error_status_threshold=settings.ERROR_STATUS_THRESHOLD,
        excluded_paths=settings.excluded_paths_list,
    )

    # ── Routes ──────────────────────────────────────────────────
    app.include_router(observability_router)
    return app


app = create_app()
