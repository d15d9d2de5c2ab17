# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Throughput metrics gathered from a task's source files."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path, PurePath

from ..core.models import HEADER_EXTENSIONS, CompileTask, PerformanceMetrics


def _resolve(source: str, root: Path) -> Path:
    path = Path(source)
    return path if path.is_absolute() else root / path


def count_lines(source_files: Sequence[str], root: Path) -> int:
    """Return the number of physical lines across readable ``source_files``."""

    total = 0
    for source in source_files:
        try:
            with _resolve(source, root).open("rb") as handle:
                total += sum(1 for _ in handle)
        except OSError:
            continue
    return total


def modules_count(task: CompileTask) -> int:
    """Return the number of module units among the task's sources.

    Languages with a package system count distinct parent directories. C and
    C++ count translation units, i.e. sources that are not headers.
    """

    if task.language.profile.has_module_system:
        return len({PurePath(source).parent for source in task.source_files})
    return sum(
        1 for source in task.source_files if PurePath(source).suffix.lstrip(".").lower() not in HEADER_EXTENSIONS
    )


def compute_performance_metrics(task: CompileTask, compilation_time: float) -> PerformanceMetrics:
    """Return metrics for ``task`` compiled in ``compilation_time`` seconds."""

    lines = count_lines(task.source_files, task.cwd)
    return PerformanceMetrics(
        compilation_time=compilation_time,
        file_count=len(task.source_files),
        lines_processed=lines,
        modules_count=modules_count(task),
        compilation_speed=lines / compilation_time if compilation_time > 0 else 0.0,
        cache_hit_rate=0.0,
    )


__all__ = ["compute_performance_metrics", "count_lines", "modules_count"]
