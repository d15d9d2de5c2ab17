# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich renderables for compile runs and toolchain status."""

from __future__ import annotations

from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..analysis.models import AnalysisResult
from ..core.models import CompileError, CompileResult, TaskStatus
from ..core.severity import is_error_like
from ..execution.events import CompletedEvent, ErrorEvent, InfoEvent, OutputEvent, OutputLineEvent
from ..toolchain import ToolchainInfo

_STATUS_STYLES = {
    TaskStatus.SUCCESS: "green",
    TaskStatus.FAILED: "red",
    TaskStatus.CANCELLED: "yellow",
}


def render_event(console: Console, event: OutputEvent) -> None:
    """Print one live output event."""

    if isinstance(event, OutputLineEvent):
        console.print(Text(event.line, style="dim red" if event.stream == "stderr" else ""))
    elif isinstance(event, InfoEvent):
        console.print(Text(event.message, style="cyan"))
    elif isinstance(event, ErrorEvent):
        console.print(Text(event.message, style="bold red"))
    elif isinstance(event, CompletedEvent):
        style = "green" if event.success else "red"
        console.print(Text(f"Process exited with code {event.exit_code}", style=style))


def build_diagnostics_table(result: CompileResult) -> Table:
    table = Table(title="Diagnostics", box=box.SIMPLE, expand=True)
    table.add_column("Severity", style="bold")
    table.add_column("Location")
    table.add_column("Code")
    table.add_column("Message", overflow="fold")
    table.add_column("Suggestion", overflow="fold")

    diagnostics: Sequence[CompileError] = (*result.errors, *result.warnings)
    for diagnostic in diagnostics:
        style = "red" if is_error_like(diagnostic.severity) else "yellow"
        suggestion = diagnostic.suggestions[0].title if diagnostic.suggestions else "-"
        table.add_row(
            f"[{style}]{diagnostic.severity.value}[/]",
            diagnostic.location if diagnostic.file else "-",
            diagnostic.code or "-",
            diagnostic.message,
            suggestion,
        )
    return table


def build_analysis_panel(analysis: AnalysisResult) -> Panel:
    """Summarise scores, cycles and suggestions of ``analysis``."""

    performance = analysis.performance_analysis
    quality = analysis.code_quality
    dependencies = analysis.dependency_analysis
    lines = [
        f"Performance: {performance.score}/100 ({performance.efficiency_rating.value}), "
        f"{performance.compilation_speed:.1f} lines/sec",
        f"Quality: {quality.overall_score} (grade {quality.quality_grade.value})",
        f"Dependencies: {dependencies.complexity.value}, health {dependencies.dependency_health.value}",
    ]
    lines.extend(f"Cycle: {' -> '.join(cycle)}" for cycle in dependencies.circular_dependencies)
    lines.extend(f"Bottleneck: {label}" for label in performance.bottlenecks)
    lines.extend(f"Suggestion: {suggestion.title}" for suggestion in analysis.optimization_suggestions)
    border = "red" if analysis.degraded else "cyan"
    return Panel("\n".join(lines), title="Analysis", border_style=border)


def build_status_panel(task_id: str, status: TaskStatus, result: CompileResult | None) -> Panel:
    style = _STATUS_STYLES.get(status, "yellow")
    detail = ""
    if result is not None:
        detail = (
            f" in {result.execution_time:.2f}s, {len(result.errors)} error(s), {len(result.warnings)} warning(s)"
        )
    return Panel(f"[{style}]Task {task_id}: {status.value}[/]{detail}", border_style=style)


def build_toolchain_table(toolchains: Sequence[ToolchainInfo]) -> Table:
    table = Table(title="Toolchains", box=box.SIMPLE, expand=True)
    table.add_column("Compiler", style="bold")
    table.add_column("Languages")
    table.add_column("Status")
    table.add_column("Version")
    table.add_column("Path", overflow="fold")
    for info in toolchains:
        style = "green" if info.installed else "red"
        state = "installed" if info.installed else "missing"
        table.add_row(
            info.name,
            ", ".join(language.display_name for language in info.languages),
            f"[{style}]{state}[/]",
            info.version,
            info.path or "-",
        )
    return table


__all__ = [
    "build_analysis_panel",
    "build_diagnostics_table",
    "build_status_panel",
    "build_toolchain_table",
    "render_event",
]
