# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Optimisation suggestions derived from metrics and diagnostics."""

from __future__ import annotations

from typing import Final

from ..core.models import CompileResult
from .benchmarks import PerformanceBenchmark
from .models import OptimizationSuggestion, OptimizationType, Priority, Tier

ERROR_RATE_THRESHOLD: Final[float] = 0.1
_MIB: Final[int] = 1024 * 1024


def optimization_suggestions(result: CompileResult, benchmark: PerformanceBenchmark) -> list[OptimizationSuggestion]:
    """Return suggestions ordered by the checks that triggered them.

    Args:
        result: Finished compilation.
        benchmark: Reference profile for the task's language.

    Returns:
        list[OptimizationSuggestion]: Speed, memory and error-rate suggestions.
    """

    metrics = result.performance_metrics
    suggestions: list[OptimizationSuggestion] = []

    if metrics.compilation_speed < benchmark.lines_per_second * 0.5:
        suggestions.append(
            OptimizationSuggestion(
                type=OptimizationType.PERFORMANCE,
                priority=Priority.HIGH,
                title="Improve compilation speed",
                description=(
                    "Compilation is slower than expected. Consider parallel compilation, "
                    "smaller files or fewer includes."
                ),
                impact=Tier.HIGH,
                effort=Tier.MEDIUM,
                details={
                    "current_speed": f"{metrics.compilation_speed:.1f} lines/sec",
                    "expected_speed": f"{benchmark.lines_per_second:.1f} lines/sec",
                },
            ),
        )

    if result.peak_memory_usage > benchmark.memory_per_file * 2:
        suggestions.append(
            OptimizationSuggestion(
                type=OptimizationType.MEMORY,
                priority=Priority.MEDIUM,
                title="Reduce memory usage",
                description="Memory usage is higher than expected. Consider optimizing data structures.",
                impact=Tier.MEDIUM,
                effort=Tier.HIGH,
                details={
                    "current_memory": f"{result.peak_memory_usage // _MIB}MB",
                    "expected_memory": f"{benchmark.memory_per_file // _MIB}MB",
                },
            ),
        )

    error_rate = len(result.errors) / max(1, metrics.lines_processed)
    if error_rate > ERROR_RATE_THRESHOLD:
        suggestions.append(
            OptimizationSuggestion(
                type=OptimizationType.QUALITY,
                priority=Priority.HIGH,
                title="Reduce compilation errors",
                description="High error rate detected. Focus on fixing syntax and type errors first.",
                impact=Tier.HIGH,
                effort=Tier.MEDIUM,
                details={"error_rate": f"{error_rate * 100:.2f}%", "total_errors": str(len(result.errors))},
            ),
        )

    return suggestions


__all__ = ["ERROR_RATE_THRESHOLD", "optimization_suggestions"]
