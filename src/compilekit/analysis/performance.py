# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Throughput scoring against per-language benchmarks."""

from __future__ import annotations

import math

from ..core.models import PerformanceMetrics
from .benchmarks import PerformanceBenchmark
from .models import EfficiencyRating, PerformanceAnalysis


def speed_ratio(metrics: PerformanceMetrics, benchmark: PerformanceBenchmark) -> float:
    """Return observed lines per second relative to the benchmark."""

    if benchmark.lines_per_second <= 0:
        return 0.0
    return metrics.compilation_speed / benchmark.lines_per_second


def performance_score(metrics: PerformanceMetrics, benchmark: PerformanceBenchmark) -> int:
    """Return a 0-100 score for ``metrics``.

    Starting from 100 the score moves by ``int(speed_ratio * 20 - 10)``, by ten
    points either way for more than ten or fewer than one file per second, and
    by ten points either way for a module-to-file ratio inside 0.3-0.7 or
    outside 0.1-0.9.
    """

    score = 100 + int(speed_ratio(metrics, benchmark) * 20 - 10)

    files_per_second = metrics.file_count / metrics.compilation_time if metrics.compilation_time > 0 else math.inf
    if files_per_second > 10:
        score += 10
    elif files_per_second < 1:
        score -= 10

    modules_ratio = metrics.modules_count / max(1, metrics.file_count)
    if 0.3 <= modules_ratio <= 0.7:
        score += 10
    elif modules_ratio < 0.1 or modules_ratio > 0.9:
        score -= 10

    return max(0, min(100, score))


def detect_bottlenecks(metrics: PerformanceMetrics, benchmark: PerformanceBenchmark) -> list[str]:
    """Return labels for the parts of a build that hold it back.

    Args:
        metrics: Measurements taken from the finished compilation.
        benchmark: Reference figures for the task's language.

    Returns:
        list[str]: Any of ``"Compilation speed"`` (below half the benchmark
        speed), ``"Too many modules"`` (more than two per file) and
        ``"Low cache efficiency"`` (hit rate under 50%), in that order.
    """

    bottlenecks: list[str] = []
    if metrics.compilation_speed < benchmark.lines_per_second * 0.5:
        bottlenecks.append("Compilation speed")
    if metrics.modules_count > metrics.file_count * 2:
        bottlenecks.append("Too many modules")
    if metrics.cache_hit_rate < 0.5:
        bottlenecks.append("Low cache efficiency")
    return bottlenecks


def improvement_suggestions(metrics: PerformanceMetrics, benchmark: PerformanceBenchmark) -> list[str]:
    """Return short, human-readable improvement hints for ``metrics``.

    Args:
        metrics: Measurements taken from the finished compilation.
        benchmark: Reference figures for the task's language.

    Returns:
        list[str]: Speed hints when the build runs below 70% of the benchmark
        speed, followed by structure hints when modules outnumber files.
    """

    improvements: list[str] = []
    if metrics.compilation_speed < benchmark.lines_per_second * 0.7:
        improvements.extend(
            ["Enable compiler optimizations", "Reduce include dependencies", "Consider parallel compilation"],
        )
    if metrics.modules_count > metrics.file_count:
        improvements.extend(["Reduce module complexity", "Improve code organization"])
    return improvements


def efficiency_rating(score: int) -> EfficiencyRating:
    """Map a 0-100 performance score onto its rating tier.

    Args:
        score: Value returned by :func:`performance_score`.

    Returns:
        EfficiencyRating: ``EXCELLENT`` from 90, ``GOOD`` from 75, ``FAIR``
        from 60, ``POOR`` from 40 and ``VERY_POOR`` below that.
    """

    if score >= 90:
        return EfficiencyRating.EXCELLENT
    if score >= 75:
        return EfficiencyRating.GOOD
    if score >= 60:
        return EfficiencyRating.FAIR
    if score >= 40:
        return EfficiencyRating.POOR
    return EfficiencyRating.VERY_POOR


def compare_to_benchmark(metrics: PerformanceMetrics, benchmark: PerformanceBenchmark) -> dict[str, float]:
    """Return speed, memory and module efficiency ratios against ``benchmark``."""

    return {
        "compilation_speed": speed_ratio(metrics, benchmark),
        "memory_efficiency": benchmark.memory_per_file / max(1, metrics.lines_processed * 100),
        "module_efficiency": benchmark.recommended_max_file_size / max(1, metrics.file_count),
    }


def analyze_performance(metrics: PerformanceMetrics, benchmark: PerformanceBenchmark) -> PerformanceAnalysis:
    """Score ``metrics`` and list bottlenecks and improvements."""

    score = performance_score(metrics, benchmark)
    return PerformanceAnalysis(
        score=score,
        bottlenecks=tuple(detect_bottlenecks(metrics, benchmark)),
        improvement_suggestions=tuple(improvement_suggestions(metrics, benchmark)),
        compilation_speed=metrics.compilation_speed,
        efficiency_rating=efficiency_rating(score),
        comparison_to_benchmark=compare_to_benchmark(metrics, benchmark),
    )


__all__ = [
    "analyze_performance",
    "compare_to_benchmark",
    "detect_bottlenecks",
    "efficiency_rating",
    "improvement_suggestions",
    "performance_score",
    "speed_ratio",
]
