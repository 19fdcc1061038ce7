# Copyright (c) 2026 Vision Contributors. All Rights Reserved.

"""
Vision Configuration — Environment-driven settings.

All configuration is loaded from environment variables (or .env file).
Uses VISION_ prefix so the host application's own settings never collide.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class VisionSettings(BaseSettings):
    """Aggregator and integration configuration loaded from environment."""

    # --- Logging ---
    LOG_LEVEL: str = Field(default="INFO")
    LOG_REPLACE_HANDLERS: bool = Field(
        default=True,
        description="Replace root handlers on startup; false keeps the host app's handlers",
    )
    ENV: str = Field(
        default="dev",
        description="Environment: dev | prod",
    )

    # --- Aggregator ---
    ERROR_LOG_CAPACITY: int = Field(
        default=10,
        ge=1,
        description="Number of most recent request errors kept in memory",
    )
    METRICS_TIMEOUT: float = Field(
        default=5.0,
        description="Per-metric collection timeout in seconds (<= 0 disables)",
    )

    # --- System metrics sampling ---
    CPU_SAMPLE_INTERVAL: float = Field(
        default=0.5,
        ge=0,
        description="Window in seconds psutil samples CPU usage over",
    )
    NETWORK_SAMPLE_INTERVAL: float = Field(
        default=1.0,
        gt=0,
        description="Window in seconds between the two network counter reads",
    )

    # --- HTTP integration ---
    ERROR_STATUS_THRESHOLD: int = Field(
        default=500,
        ge=100,
        le=599,
        description="Responses with status >= this value are recorded as errors",
    )
    EXCLUDED_PATHS: str = Field(
        default="",
        description="Comma-separated request paths the middleware does not track",
    )

    model_config = {
        "env_prefix": "VISION_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @property
    def excluded_paths_list(self) -> List[str]:
        return [p.strip() for p in self.EXCLUDED_PATHS.split(",") if p.strip()]

    @property
    def metrics_timeout(self) -> Optional[float]:
        """Collection timeout, or None when disabled."""
        return self.METRICS_TIMEOUT if self.METRICS_TIMEOUT > 0 else None


# Global singleton
settings = VisionSettings()
