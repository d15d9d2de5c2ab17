# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders."""

from __future__ import annotations

from .loader import discover_config_path, load_config
from .models import AnalysisConfig, Config, ConfigError, ExecutionConfig, OutputConfig, default_parallel_jobs

__all__ = [
    "AnalysisConfig",
    "Config",
    "ConfigError",
    "ExecutionConfig",
    "OutputConfig",
    "default_parallel_jobs",
    "discover_config_path",
    "load_config",
]
