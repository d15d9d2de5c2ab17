# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core models, severities and user-facing logging."""

from __future__ import annotations

from .errors import InvalidTransitionError, TaskNotFoundError
from .models import (
    CompileError,
    CompileResult,
    CompileTask,
    CompilerConfig,
    DependencyGraph,
    ErrorSuggestion,
    Language,
    OptimizationLevel,
    PerformanceMetrics,
    TaskPriority,
    TaskStatus,
)
from .severity import ErrorSeverity, severity_from_token

__all__ = [
    "CompileError",
    "CompileResult",
    "CompileTask",
    "CompilerConfig",
    "DependencyGraph",
    "ErrorSeverity",
    "ErrorSuggestion",
    "InvalidTransitionError",
    "Language",
    "OptimizationLevel",
    "PerformanceMetrics",
    "TaskNotFoundError",
    "TaskPriority",
    "TaskStatus",
    "severity_from_token",
]
