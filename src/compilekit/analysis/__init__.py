# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Performance, dependency, quality and resource analysis of compile results."""

from __future__ import annotations

from .analyzer import ResultAnalyzer, degraded_analysis
from .benchmarks import BENCHMARKS, PerformanceBenchmark, benchmark_for
from .dependencies import analyze_dependencies, detect_cycles, graph_from_mapping
from .models import (
    AnalysisReport,
    AnalysisResult,
    CodeIssue,
    CodeQuality,
    DependencyAnalysis,
    IssueType,
    OptimizationSuggestion,
    PerformanceAnalysis,
    ResourceUsage,
)

__all__ = [
    "AnalysisReport",
    "AnalysisResult",
    "BENCHMARKS",
    "CodeIssue",
    "CodeQuality",
    "DependencyAnalysis",
    "IssueType",
    "OptimizationSuggestion",
    "PerformanceAnalysis",
    "PerformanceBenchmark",
    "ResourceUsage",
    "ResultAnalyzer",
    "analyze_dependencies",
    "benchmark_for",
    "degraded_analysis",
    "detect_cycles",
    "graph_from_mapping",
]
