# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
API Dependencies — FastAPI dependency injection.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from vision.core.aggregator import StatsAggregator


def get_aggregator(request: Request) -> StatsAggregator:
    """Return the StatsAggregator the application was created with."""
    aggregator = getattr(request.app.state, "vision", None)
    if aggregator is None:
        raise HTTPException(status_code=503, detail="Stats aggregator not initialized")
    return aggregator
