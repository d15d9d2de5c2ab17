# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Local compilation orchestration: scheduling, execution, diagnostics and analysis."""

from __future__ import annotations

from importlib import metadata

from .analysis import AnalysisResult, ResultAnalyzer
from .config import Config, load_config
from .core import CompileError, CompileResult, CompilerConfig, CompileTask, Language, TaskPriority, TaskStatus
from .diagnostics import DiagnosticParser
from .execution import ExecutionBridge
from .orchestration import TaskScheduler

__all__ = [
    "AnalysisResult",
    "CompileError",
    "CompileResult",
    "CompileTask",
    "CompilerConfig",
    "Config",
    "DiagnosticParser",
    "ExecutionBridge",
    "Language",
    "ResultAnalyzer",
    "TaskPriority",
    "TaskScheduler",
    "TaskStatus",
    "__version__",
    "load_config",
]

try:
    __version__ = metadata.version("compilekit")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
