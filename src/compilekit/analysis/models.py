# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Result models produced by :class:`compilekit.analysis.analyzer.ResultAnalyzer`."""

from __future__ import annotations

import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..core.models import CompileError, DependencyGraph, ErrorSuggestion, PerformanceMetrics
from ..core.severity import ErrorSeverity

STABLE_TREND = "Stable"


class EfficiencyRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    VERY_POOR = "very_poor"


class DependencyComplexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    VERY_COMPLEX = "very_complex"


class DependencyHealth(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    VERY_POOR = "very_poor"


class QualityGrade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class OptimizationType(str, Enum):
    PERFORMANCE = "performance"
    MEMORY = "memory"
    QUALITY = "quality"
    GENERAL = "general"


class Priority(str, Enum):
    """Priority tier shared by optimisation suggestions and recommendations."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Tier(str, Enum):
    """Impact and effort tier; ``UNKNOWN`` when it cannot be estimated."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


class IssueType(str, Enum):
    UNDEFINED_SYMBOL = "undefined_symbol"
    SYNTAX_ERROR = "syntax_error"
    GENERAL_ERROR = "general_error"
    WARNING = "warning"
    PERFORMANCE = "performance"
    ANALYSIS_ERROR = "analysis_error"


class IssueSeverity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BatteryImpact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PerformanceRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    VERY_POOR = "very_poor"


class RecommendationType(str, Enum):
    OPTIMIZATION = "optimization"
    QUALITY = "quality"
    DEPENDENCY = "dependency"
    GENERAL = "general"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class PerformanceAnalysis(_Frozen):
    """Throughput score compared against the language benchmark."""

    score: int = Field(default=0, ge=0, le=100)
    bottlenecks: tuple[str, ...] = Field(default_factory=tuple)
    improvement_suggestions: tuple[str, ...] = Field(default_factory=tuple)
    compilation_speed: float = 0.0
    efficiency_rating: EfficiencyRating = EfficiencyRating.POOR
    comparison_to_benchmark: dict[str, float] = Field(default_factory=dict)


class DependencyAnalysis(_Frozen):
    """Dependency graph plus cycle, hot-spot and density findings."""

    dependency_graph: DependencyGraph = Field(default_factory=DependencyGraph)
    circular_dependencies: tuple[tuple[str, ...], ...] = Field(default_factory=tuple)
    critical_dependencies: tuple[str, ...] = Field(default_factory=tuple)
    complexity: DependencyComplexity = DependencyComplexity.SIMPLE
    dependency_health: DependencyHealth = DependencyHealth.GOOD


class QualityIssue(_Frozen):
    description: str
    severity: IssueSeverity


class QualityTrend(_Frozen):
    error_trend: str = STABLE_TREND
    warning_trend: str = STABLE_TREND
    overall_trend: str = STABLE_TREND


class CodeQuality(_Frozen):
    """Diagnostic-based quality score and letter grade."""

    overall_score: int = 0
    issues: tuple[QualityIssue, ...] = Field(default_factory=tuple)
    trends: QualityTrend = Field(default_factory=QualityTrend)
    recommendations: tuple[str, ...] = Field(default_factory=tuple)
    quality_grade: QualityGrade = QualityGrade.F


class OptimizationSuggestion(_Frozen):
    type: OptimizationType
    priority: Priority
    title: str
    description: str
    impact: Tier
    effort: Tier
    details: dict[str, str] = Field(default_factory=dict)


class ResourceUsage(_Frozen):
    """Estimated resource footprint of one compilation."""

    cpu_usage: float = 0.0
    memory_usage: int = 0
    disk_usage: int = 0
    network_usage: int = 0
    battery_impact: BatteryImpact = BatteryImpact.LOW
    performance_rating: PerformanceRating = PerformanceRating.POOR


class CodeIssue(_Frozen):
    type: IssueType
    severity: IssueSeverity
    description: str
    location: str
    suggestions: tuple[ErrorSuggestion, ...] = Field(default_factory=tuple)


class AnalysisResult(_Frozen):
    """Complete post-compilation analysis for one task."""

    task_id: str
    timestamp: float = Field(default_factory=time.time)
    performance_analysis: PerformanceAnalysis = Field(default_factory=PerformanceAnalysis)
    dependency_analysis: DependencyAnalysis = Field(default_factory=DependencyAnalysis)
    code_quality: CodeQuality = Field(default_factory=CodeQuality)
    optimization_suggestions: tuple[OptimizationSuggestion, ...] = Field(default_factory=tuple)
    resource_usage: ResourceUsage = Field(default_factory=ResourceUsage)
    issues: tuple[CodeIssue, ...] = Field(default_factory=tuple)

    @property
    def degraded(self) -> bool:
        """Return ``True`` when this result stands in for a failed analysis."""

        return any(issue.type is IssueType.ANALYSIS_ERROR for issue in self.issues)


class Recommendation(_Frozen):
    type: RecommendationType
    priority: Priority
    title: str
    description: str
    impact: Tier
    effort: Tier


class ErrorMetrics(_Frozen):
    total_errors: int = 0
    error_types: dict[ErrorSeverity, tuple[CompileError, ...]] = Field(default_factory=dict)
    files_with_errors: int = 0


class ResourceMetrics(_Frozen):
    execution_time: float = 0.0
    cpu_time: float = 0.0
    memory_mb: float = 0.0
    io_mb: float = 0.0


class DetailedMetrics(_Frozen):
    compilation_metrics: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    error_metrics: ErrorMetrics = Field(default_factory=ErrorMetrics)
    resource_metrics: ResourceMetrics = Field(default_factory=ResourceMetrics)


class AnalysisTrends(_Frozen):
    performance_trend: str = STABLE_TREND
    quality_trend: str = STABLE_TREND
    dependency_trend: str = STABLE_TREND


class AnalysisSummary(_Frozen):
    overall_score: int = 0
    key_findings: tuple[str, ...] = Field(default_factory=tuple)
    top_recommendations: tuple[str, ...] = Field(default_factory=tuple)


class AnalysisReport(_Frozen):
    """Human-oriented report assembled from an :class:`AnalysisResult`."""

    task_id: str
    analysis: AnalysisResult
    recommendations: tuple[Recommendation, ...] = Field(default_factory=tuple)
    metrics: DetailedMetrics = Field(default_factory=DetailedMetrics)
    trends: AnalysisTrends = Field(default_factory=AnalysisTrends)
    summary: AnalysisSummary = Field(default_factory=AnalysisSummary)

    @classmethod
    def empty(cls, task_id: str) -> AnalysisReport:
        """Return a report with neutral defaults for ``task_id``."""

        return cls(task_id=task_id, analysis=AnalysisResult(task_id=task_id))


__all__ = [
    "AnalysisReport",
    "AnalysisResult",
    "AnalysisSummary",
    "AnalysisTrends",
    "BatteryImpact",
    "CodeIssue",
    "CodeQuality",
    "DependencyAnalysis",
    "DependencyComplexity",
    "DependencyHealth",
    "DetailedMetrics",
    "EfficiencyRating",
    "ErrorMetrics",
    "IssueSeverity",
    "IssueType",
    "OptimizationSuggestion",
    "OptimizationType",
    "PerformanceAnalysis",
    "PerformanceRating",
    "Priority",
    "QualityGrade",
    "QualityIssue",
    "QualityTrend",
    "Recommendation",
    "RecommendationType",
    "ResourceMetrics",
    "ResourceUsage",
    "STABLE_TREND",
    "Tier",
]
