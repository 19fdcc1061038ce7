# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
Structured Logging — JSON lines carrying request and metric context.

Standalone deployments let setup_logging() own the root logger. When the
middleware is embedded in a host application that already configured
logging, pass replace_handlers=False to add the JSON handler next to the
host's handlers instead of removing them.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Iterable, Optional

DEFAULT_CONTEXT_KEYS = ("method", "path", "metric")


class StructuredFormatter(logging.Formatter):
    """
    Renders each record as one JSON object.

    Attributes named in `context_keys` (passed through `extra=`) are copied
    into the object when set.
    """

    def __init__(self, context_keys: Iterable[str] = DEFAULT_CONTEXT_KEYS) -> None:
        super().__init__()
        self.context_keys = tuple(context_keys)

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key))
            for key in self.context_keys
            if getattr(record, key, None)
        )
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _structured_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if isinstance(handler.formatter, StructuredFormatter):
            return handler
    return None


def setup_logging(level: str = "INFO", replace_handlers: bool = True) -> None:
    """
    Install the JSON handler on the root logger.

    replace_handlers=False keeps existing handlers and never adds a second
    JSON handler, so repeated calls (one per app startup) are safe.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if replace_handlers:
        root.handlers.clear()
    elif _structured_handler(root) is not None:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)
