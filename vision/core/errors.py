# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
Vision Errors.
"""

from __future__ import annotations


class VisionError(Exception):
    """Base class for errors raised by the vision package."""


class MetricsCollectionError(VisionError):
    """A host metric could not be measured."""

    def __init__(self, metric: str, reason: str):
        self.metric = metric
        self.reason = reason
        super().__init__(f"Failed to get {metric}: {reason}")
