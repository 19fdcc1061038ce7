# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
Observability API — Health check and stats snapshot.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from vision.api.deps import get_aggregator
from vision.core.aggregator import StatsAggregator

router = APIRouter(tags=["observability"])


@router.get("/health")
async def health_check():
    return {"status": "ok", "version": "0.1.0"}


@router.get("/api/vision/stats")
async def get_stats(
    errors: bool = Query(True, description="Include the recent error log"),
    aggregator: StatsAggregator = Depends(get_aggregator),
) -> Dict[str, Any]:
    """Return request/database counters with current host metrics."""
    response = await aggregator.snapshot(include_errors=errors)
    return response.to_dict()
