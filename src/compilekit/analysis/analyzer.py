# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Post-compilation analysis facade with a short-lived result cache."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from typing import Final

from ..cache.in_memory import TTLCache
from ..config.models import DEFAULT_ANALYSIS_TTL_SECONDS
from ..core.logging import DebugLogger, warn
from ..core.models import CompileError, CompileResult, CompileTask
from ..core.severity import ErrorSeverity
from .benchmarks import benchmark_for
from .dependencies import analyze_dependencies
from .models import (
    AnalysisReport,
    AnalysisResult,
    AnalysisSummary,
    AnalysisTrends,
    CodeIssue,
    CodeQuality,
    DetailedMetrics,
    ErrorMetrics,
    IssueSeverity,
    IssueType,
    OptimizationSuggestion,
    OptimizationType,
    PerformanceAnalysis,
    Priority,
    Recommendation,
    RecommendationType,
    ResourceMetrics,
    ResourceUsage,
    Tier,
)
from .optimization import optimization_suggestions
from .performance import analyze_performance
from .quality import analyze_quality, detect_issues
from .resources import analyze_resources, estimate_cpu_usage, estimate_disk_usage

ANALYSIS_SYSTEM_LOCATION: Final[str] = "Analysis system"
TOP_RECOMMENDATIONS: Final[int] = 3
_MIB: Final[float] = 1024.0 * 1024.0

AnalysisKey = tuple[str, float]


def degraded_analysis(task_id: str, error: object, *, timestamp: float | None = None) -> AnalysisResult:
    """Return the stand-in result used when analysis raised ``error``."""

    return AnalysisResult(
        task_id=task_id,
        timestamp=time.time() if timestamp is None else timestamp,
        performance_analysis=PerformanceAnalysis(),
        code_quality=CodeQuality(),
        optimization_suggestions=(
            OptimizationSuggestion(
                type=OptimizationType.GENERAL,
                priority=Priority.LOW,
                title="Analysis failed",
                description=f"Unable to analyze due to error: {error}",
                impact=Tier.UNKNOWN,
                effort=Tier.UNKNOWN,
            ),
        ),
        resource_usage=ResourceUsage(),
        issues=(
            CodeIssue(
                type=IssueType.ANALYSIS_ERROR,
                severity=IssueSeverity.HIGH,
                description=f"Analysis failed: {error}",
                location=ANALYSIS_SYSTEM_LOCATION,
            ),
        ),
    )


class ResultAnalyzer:
    """Score finished compilations and assemble reports.

    Results are cached per ``(task id, execution time)`` for ``cache_ttl``
    seconds; a cache hit returns the very same :class:`AnalysisResult` object.
    Neither :meth:`analyze` nor :meth:`generate_report` raises: failures are
    warned about and folded into degraded results.
    """

    def __init__(
        self,
        *,
        cache_ttl: float = DEFAULT_ANALYSIS_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        debug_logger: DebugLogger | None = None,
    ) -> None:
        self._cache: TTLCache[AnalysisKey, AnalysisResult] = TTLCache(cache_ttl, clock=clock)
        self._debug = debug_logger

    @property
    def cache(self) -> TTLCache[AnalysisKey, AnalysisResult]:
        return self._cache

    def analyze(
        self,
        result: CompileResult,
        task: CompileTask,
        source_files: Sequence[str] | None = None,
    ) -> AnalysisResult:
        """Return the analysis of ``result`` for ``task``.

        Args:
            result: Finished compilation outcome.
            task: Task that produced ``result``; supplies language and paths.
            source_files: Files to scan for dependencies, defaulting to the
                task's own sources.

        Returns:
            AnalysisResult: Cached, freshly computed, or degraded analysis.
        """

        key: AnalysisKey = (task.id, result.execution_time)
        cached = self._cache.get(key)
        if cached is not None:
            self._trace(f"analysis cache hit for {task.id}")
            return cached
        try:
            analysis = self._compute(result, task, source_files)
        except Exception as exc:  # analysis must never fail the compile task
            warn(f"Analysis of task {task.id} failed: {exc}")
            return degraded_analysis(task.id, exc)
        return self._cache.put(key, analysis)

    def _compute(
        self,
        result: CompileResult,
        task: CompileTask,
        source_files: Sequence[str] | None,
    ) -> AnalysisResult:
        benchmark = benchmark_for(task.language)
        files = list(task.source_files if source_files is None else source_files)
        self._trace(f"analysing {task.id}: {len(files)} files against {task.language.display_name} benchmark")
        return AnalysisResult(
            task_id=task.id,
            performance_analysis=analyze_performance(result.performance_metrics, benchmark),
            dependency_analysis=analyze_dependencies(
                files,
                task.language,
                root=task.cwd,
                debug_logger=self._debug,
            ),
            code_quality=analyze_quality(result),
            optimization_suggestions=tuple(optimization_suggestions(result, benchmark)),
            resource_usage=analyze_resources(result, task.cwd),
            issues=tuple(detect_issues(result, benchmark)),
        )

    def generate_report(self, analysis: AnalysisResult, task: CompileTask, result: CompileResult) -> AnalysisReport:
        """Assemble a report from ``analysis``; an empty report on failure."""

        try:
            return AnalysisReport(
                task_id=task.id,
                analysis=analysis,
                recommendations=tuple(_recommendation_for(s) for s in analysis.optimization_suggestions),
                metrics=_detailed_metrics(result, task),
                trends=AnalysisTrends(),
                summary=AnalysisSummary(
                    overall_score=(analysis.performance_analysis.score + analysis.code_quality.overall_score) // 2,
                    key_findings=tuple(issue.description for issue in analysis.issues),
                    top_recommendations=tuple(
                        s.title for s in analysis.optimization_suggestions[:TOP_RECOMMENDATIONS]
                    ),
                ),
            )
        except Exception as exc:  # report generation degrades like analysis
            warn(f"Report generation for task {task.id} failed: {exc}")
            return AnalysisReport.empty(task.id)

    def clear_cache(self) -> None:
        self._cache.clear()

    def _trace(self, message: str) -> None:
        if self._debug is not None:
            self._debug(message)


def _recommendation_for(suggestion: OptimizationSuggestion) -> Recommendation:
    return Recommendation(
        type=RecommendationType.OPTIMIZATION,
        priority=suggestion.priority,
        title=suggestion.title,
        description=suggestion.description,
        impact=suggestion.impact,
        effort=suggestion.effort,
    )


def _detailed_metrics(result: CompileResult, task: CompileTask) -> DetailedMetrics:
    by_severity: dict[ErrorSeverity, list[CompileError]] = {}
    for error in result.errors:
        by_severity.setdefault(error.severity, []).append(error)
    return DetailedMetrics(
        compilation_metrics=result.performance_metrics,
        error_metrics=ErrorMetrics(
            total_errors=len(result.errors),
            error_types={severity: tuple(errors) for severity, errors in by_severity.items()},
            files_with_errors=len({error.file for error in result.errors}),
        ),
        resource_metrics=ResourceMetrics(
            execution_time=result.execution_time,
            cpu_time=estimate_cpu_usage(result.execution_time),
            memory_mb=result.peak_memory_usage / _MIB,
            io_mb=estimate_disk_usage(result.output_files, task.cwd) / _MIB,
        ),
    )


__all__ = ["ANALYSIS_SYSTEM_LOCATION", "ResultAnalyzer", "degraded_analysis"]
