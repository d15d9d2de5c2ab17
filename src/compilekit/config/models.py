# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the compilation engine."""

from __future__ import annotations

import math
import os
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TIMEOUT_SECONDS: Final[float] = 300.0
DEFAULT_POLL_INTERVAL_SECONDS: Final[float] = 0.1
DEFAULT_MAX_OUTPUT_BYTES: Final[int] = 10 * 1024 * 1024
DEFAULT_ANALYSIS_TTL_SECONDS: Final[float] = 300.0


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


def default_parallel_jobs() -> int:
    """Return a CPU count scaled down for concurrent compilation.

    Returns:
        int: Rounded-down count representing roughly 75% of available CPU
        cores while guaranteeing a minimum of one worker.
    """

    cores = os.cpu_count() or 1
    return max(1, math.floor(cores * 0.75))


class ExecutionConfig(BaseModel):
    """Process execution limits shared by the scheduler and bridge."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    max_concurrency: int = Field(default_factory=default_parallel_jobs, ge=1)
    timeout_s: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    poll_interval_s: float = Field(default=DEFAULT_POLL_INTERVAL_SECONDS, gt=0)
    max_output_bytes: int = Field(default=DEFAULT_MAX_OUTPUT_BYTES, ge=1024)


class AnalysisConfig(BaseModel):
    """Post-compilation analysis settings."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    enabled: bool = True
    cache_ttl_s: float = Field(default=DEFAULT_ANALYSIS_TTL_SECONDS, ge=0)


class OutputConfig(BaseModel):
    """Console presentation preferences."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    color: bool = True
    emoji: bool = True
    quiet: bool = False


class Config(BaseModel):
    """Top-level configuration aggregating every section."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-compatible mapping of the configuration."""

        return self.model_dump(mode="json")


__all__ = [
    "AnalysisConfig",
    "Config",
    "ConfigError",
    "DEFAULT_ANALYSIS_TTL_SECONDS",
    "DEFAULT_MAX_OUTPUT_BYTES",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "DEFAULT_TIMEOUT_SECONDS",
    "ExecutionConfig",
    "OutputConfig",
    "default_parallel_jobs",
]
