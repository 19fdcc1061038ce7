# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
Timing helpers — record a block of code as a request or a database query.

    with track_db_query(aggregator):
        rows = await session.execute(stmt)
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from vision.core.aggregator import StatsAggregator


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


@contextmanager
def track_request(
    aggregator: StatsAggregator,
    method: str = "",
    path: str = "",
) -> Iterator[None]:
    """Record the block as one request; an escaping exception is also recorded as an error."""
    start = time.perf_counter()
    try:
        yield
    except Exception as e:
        aggregator.record_error(e, method=method, path=path)
        raise
    finally:
        aggregator.record_request(_elapsed_ms(start))


@contextmanager
def track_db_query(aggregator: StatsAggregator) -> Iterator[None]:
    """Record the block as one database query; an escaping exception counts as a DB error."""
    start = time.perf_counter()
    try:
        yield
    except Exception:
        aggregator.record_db_error()
        raise
    finally:
        aggregator.record_db_query(_elapsed_ms(start))
