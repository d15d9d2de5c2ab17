# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reference performance profiles per language."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from ..core.models import Language

_KIB: Final[int] = 1024
_MIB: Final[int] = 1024 * 1024


@dataclass(frozen=True, slots=True)
class PerformanceBenchmark:
    """Typical figures for a healthy compilation in one language.

    Attributes:
        avg_compilation_time: Typical wall-clock seconds per compilation.
        lines_per_second: Expected throughput.
        memory_per_file: Expected peak memory per file in bytes.
        recommended_max_file_size: Largest advisable file, in lines.
    """

    avg_compilation_time: float
    lines_per_second: float
    memory_per_file: int
    recommended_max_file_size: int


BENCHMARKS: Final[dict[Language, PerformanceBenchmark]] = {
    Language.JAVA: PerformanceBenchmark(2.0, 5000.0, 1 * _MIB, 10000),
    Language.JAVASCRIPT: PerformanceBenchmark(0.5, 20000.0, 512 * _KIB, 50000),
    Language.PYTHON: PerformanceBenchmark(1.0, 10000.0, 256 * _KIB, 20000),
    Language.CPP: PerformanceBenchmark(5.0, 1000.0, 5 * _MIB, 5000),
    Language.C: PerformanceBenchmark(3.0, 2000.0, 2 * _MIB, 8000),
    Language.RUST: PerformanceBenchmark(8.0, 800.0, 10 * _MIB, 3000),
    Language.GO: PerformanceBenchmark(2.0, 5000.0, 3 * _MIB, 10000),
}


def benchmark_for(language: Language) -> PerformanceBenchmark:
    """Return the benchmark registered for ``language``.

    Raises:
        KeyError: If no benchmark exists for ``language``.
    """

    return BENCHMARKS[language]


__all__ = ["BENCHMARKS", "PerformanceBenchmark", "benchmark_for"]
