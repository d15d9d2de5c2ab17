# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resource footprint estimates for a finished compilation."""

from __future__ import annotations

from pathlib import Path

from ..core.models import CompileResult
from .models import BatteryImpact, PerformanceRating, ResourceUsage


def estimate_cpu_usage(execution_time: float) -> float:
    """Return a 0-100 CPU estimate growing ten points per second."""

    return min(100.0, max(0.0, execution_time) * 10)


def estimate_disk_usage(output_files: tuple[str, ...], root: Path | None = None) -> int:
    """Return the combined size in bytes of the output artifacts that exist."""

    total = 0
    for output in output_files:
        path = Path(output)
        if root is not None and not path.is_absolute():
            path = root / path
        try:
            total += path.stat().st_size
        except OSError:
            continue
    return total


def battery_impact(execution_time: float) -> BatteryImpact:
    """Classify the energy cost of a run by its wall-clock duration.

    Args:
        execution_time: Seconds the toolchain ran.

    Returns:
        BatteryImpact: ``HIGH`` above 30s, ``MEDIUM`` above 10s, else ``LOW``.
    """

    if execution_time > 30:
        return BatteryImpact.HIGH
    if execution_time > 10:
        return BatteryImpact.MEDIUM
    return BatteryImpact.LOW


def performance_rating(execution_time: float) -> PerformanceRating:
    """Rate a run by duration alone, independent of the benchmark score.

    Args:
        execution_time: Seconds the toolchain ran.

    Returns:
        PerformanceRating: ``EXCELLENT`` under 5s, ``GOOD`` under 15s,
        ``FAIR`` under 30s, ``POOR`` under 60s and ``VERY_POOR`` otherwise.
    """

    if execution_time < 5:
        return PerformanceRating.EXCELLENT
    if execution_time < 15:
        return PerformanceRating.GOOD
    if execution_time < 30:
        return PerformanceRating.FAIR
    if execution_time < 60:
        return PerformanceRating.POOR
    return PerformanceRating.VERY_POOR


def analyze_resources(result: CompileResult, root: Path | None = None) -> ResourceUsage:
    """Return CPU, memory, disk and battery estimates for ``result``."""

    return ResourceUsage(
        cpu_usage=estimate_cpu_usage(result.execution_time),
        memory_usage=result.peak_memory_usage,
        disk_usage=estimate_disk_usage(result.output_files, root),
        network_usage=0,
        battery_impact=battery_impact(result.execution_time),
        performance_rating=performance_rating(result.execution_time),
    )


__all__ = [
    "analyze_resources",
    "battery_impact",
    "estimate_cpu_usage",
    "estimate_disk_usage",
    "performance_rating",
]
