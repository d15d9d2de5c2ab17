# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Diagnostic-driven quality scoring and issue detection."""

from __future__ import annotations

from typing import Final

from ..core.models import CompileError, CompileResult, ErrorSuggestion
from ..core.severity import ErrorSeverity, is_error_like
from .benchmarks import PerformanceBenchmark
from .models import CodeIssue, CodeQuality, IssueSeverity, IssueType, QualityGrade, QualityIssue, QualityTrend

ERROR_PENALTY: Final[int] = 5
WARNING_PENALTY: Final[int] = 2
SUCCESS_BONUS: Final[int] = 10
WARNING_LIMIT: Final[int] = 5
PROJECT_LOCATION: Final[str] = "Project"

_SLOW_COMPILATION_SUGGESTION: Final[ErrorSuggestion] = ErrorSuggestion(
    title="Optimize compilation",
    description="Consider breaking up large files or trimming includes.",
    confidence=0.8,
)


def quality_score(result: CompileResult) -> int:
    """Return ``100 - 5*errors - 2*warnings``, plus 10 on success, floored at 0.

    A clean successful build therefore scores 110.
    """

    score = 100 - len(result.errors) * ERROR_PENALTY - len(result.warnings) * WARNING_PENALTY
    if result.success:
        score += SUCCESS_BONUS
    return max(0, score)


def quality_grade(score: int) -> QualityGrade:
    """Return the letter grade for a quality ``score``.

    Args:
        score: Value returned by :func:`quality_score`; scores above 100 are
            still graded ``A``.

    Returns:
        QualityGrade: ``A`` from 90 down to ``F`` below 60, in steps of ten.
    """

    if score >= 90:
        return QualityGrade.A
    if score >= 80:
        return QualityGrade.B
    if score >= 70:
        return QualityGrade.C
    if score >= 60:
        return QualityGrade.D
    return QualityGrade.F


def quality_issues(result: CompileResult) -> list[QualityIssue]:
    """Return project-level quality problems for ``result``.

    Args:
        result: Finished compilation with parsed diagnostics.

    Returns:
        list[QualityIssue]: A high-severity entry when any error was reported
        and a medium-severity entry when more than five warnings were.
    """

    issues: list[QualityIssue] = []
    if result.errors:
        issues.append(QualityIssue(description="Compilation errors detected", severity=IssueSeverity.HIGH))
    if len(result.warnings) > WARNING_LIMIT:
        issues.append(QualityIssue(description="Too many warnings", severity=IssueSeverity.MEDIUM))
    return issues


def quality_recommendations(issues: list[QualityIssue]) -> list[str]:
    """Return follow-up advice; more than ten issues also suggests a review."""

    recommendations: list[str] = []
    if any(issue.severity is IssueSeverity.HIGH for issue in issues):
        recommendations.append("Address high-severity issues immediately")
    if len(issues) > 10:
        recommendations.append("Consider code review and refactoring")
    return recommendations


def analyze_quality(result: CompileResult) -> CodeQuality:
    """Return the quality score, grade, issues and recommendations for ``result``."""

    score = quality_score(result)
    issues = quality_issues(result)
    return CodeQuality(
        overall_score=score,
        issues=tuple(issues),
        trends=QualityTrend(overall_trend="Improving" if result.success else "Declining"),
        recommendations=tuple(quality_recommendations(issues)),
        quality_grade=quality_grade(score),
    )


def _issue_for(diagnostic: CompileError) -> CodeIssue | None:
    location = diagnostic.location
    if is_error_like(diagnostic.severity):
        lowered = diagnostic.message.lower()
        if "undefined" in lowered:
            issue_type, description = IssueType.UNDEFINED_SYMBOL, f"Undefined symbol: {diagnostic.message}"
        elif "syntax" in lowered:
            issue_type, description = IssueType.SYNTAX_ERROR, f"Syntax error: {diagnostic.message}"
        else:
            issue_type, description = IssueType.GENERAL_ERROR, f"Compilation error: {diagnostic.message}"
        return CodeIssue(
            type=issue_type,
            severity=IssueSeverity.HIGH,
            description=description,
            location=location,
            suggestions=diagnostic.suggestions,
        )
    if diagnostic.severity is ErrorSeverity.WARNING:
        return CodeIssue(
            type=IssueType.WARNING,
            severity=IssueSeverity.MEDIUM,
            description=f"Warning: {diagnostic.message}",
            location=location,
            suggestions=diagnostic.suggestions,
        )
    return None


def detect_issues(result: CompileResult, benchmark: PerformanceBenchmark | None) -> list[CodeIssue]:
    """Merge compiler diagnostics with derived performance issues.

    Errors become high-severity issues, warnings medium-severity ones. A
    compilation slower than 30% of the benchmark adds a project-level
    performance issue.
    """

    issues = [issue for diagnostic in (*result.errors, *result.warnings) if (issue := _issue_for(diagnostic))]
    if benchmark is not None:
        if result.performance_metrics.compilation_speed < benchmark.lines_per_second * 0.3:
            issues.append(
                CodeIssue(
                    type=IssueType.PERFORMANCE,
                    severity=IssueSeverity.MEDIUM,
                    description="Very slow compilation speed",
                    location=PROJECT_LOCATION,
                    suggestions=(_SLOW_COMPILATION_SUGGESTION,),
                ),
            )
    return issues


__all__ = [
    "analyze_quality",
    "detect_issues",
    "quality_grade",
    "quality_issues",
    "quality_recommendations",
    "quality_score",
]
