# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the compilekit package."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from .severity import ErrorSeverity, is_error_like


@dataclass(frozen=True, slots=True)
class LanguageProfile:
    """Static metadata describing how a language is compiled."""

    display_name: str
    extensions: tuple[str, ...]
    default_compiler: str
    has_module_system: bool


class Language(str, Enum):
    """Programming languages the engine knows how to drive."""

    JAVA = "java"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    CPP = "cpp"
    C = "c"
    RUST = "rust"
    GO = "go"

    @property
    def profile(self) -> LanguageProfile:
        """Return the static profile registered for this language."""

        return LANGUAGE_PROFILES[self]

    @property
    def display_name(self) -> str:
        """Return the human-readable language name."""

        return self.profile.display_name

    @property
    def extensions(self) -> tuple[str, ...]:
        """Return recognised source file extensions (without the dot)."""

        return self.profile.extensions

    @property
    def default_compiler(self) -> str:
        """Return the toolchain command used when a task does not override it."""

        return self.profile.default_compiler

    @classmethod
    def from_path(cls, path: str | Path) -> Language | None:
        """Guess the language of ``path`` from its extension."""

        suffix = Path(path).suffix.lstrip(".").lower()
        for language in cls:
            if suffix in language.extensions:
                return language
        return None


LANGUAGE_PROFILES: Final[dict[Language, LanguageProfile]] = {
    Language.JAVA: LanguageProfile("Java", ("java", "kt"), "javac", True),
    Language.JAVASCRIPT: LanguageProfile("JavaScript", ("js", "ts", "jsx", "tsx"), "node", True),
    Language.PYTHON: LanguageProfile("Python", ("py", "py3"), "python3", True),
    Language.CPP: LanguageProfile("C++", ("cpp", "cc", "cxx", "h", "hpp"), "g++", False),
    Language.C: LanguageProfile("C", ("c", "h"), "gcc", False),
    Language.RUST: LanguageProfile("Rust", ("rs",), "rustc", True),
    Language.GO: LanguageProfile("Go", ("go",), "go", True),
}

HEADER_EXTENSIONS: Final[frozenset[str]] = frozenset({"h", "hh", "hpp", "hxx"})


class TaskPriority(str, Enum):
    """Scheduling priority of a compile task."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Return the queue rank; lower ranks are dequeued first."""

        return _PRIORITY_RANK[self]


_PRIORITY_RANK: Final[dict[TaskPriority, int]] = {
    TaskPriority.CRITICAL: 0,
    TaskPriority.HIGH: 1,
    TaskPriority.NORMAL: 2,
    TaskPriority.LOW: 3,
}


class TaskStatus(str, Enum):
    """Lifecycle states of a compile task."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` when no further transitions may occur."""

        return self in TERMINAL_STATUSES

    def can_transition_to(self, target: TaskStatus) -> bool:
        """Return ``True`` when moving from this status to ``target`` is legal."""

        return target in _ALLOWED_TRANSITIONS[self]


TERMINAL_STATUSES: Final[frozenset[TaskStatus]] = frozenset(
    {TaskStatus.SUCCESS, TaskStatus.FAILED, TaskStatus.CANCELLED},
)

# PENDING may jump straight to FAILED (dependency blocked) or CANCELLED.
_ALLOWED_TRANSITIONS: Final[dict[TaskStatus, frozenset[TaskStatus]]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.RUNNING, TaskStatus.FAILED, TaskStatus.CANCELLED}),
    TaskStatus.RUNNING: frozenset({TaskStatus.SUCCESS, TaskStatus.FAILED, TaskStatus.CANCELLED}),
    TaskStatus.SUCCESS: frozenset(),
    TaskStatus.FAILED: frozenset(),
    TaskStatus.CANCELLED: frozenset(),
}


class OptimizationLevel(str, Enum):
    """Optimisation presets translated into toolchain flags."""

    NONE = "none"
    LESS = "less"
    MORE = "more"
    AGGRESSIVE = "aggressive"

    @property
    def flag(self) -> str:
        """Return the conventional ``-O`` flag for this level."""

        return _OPTIMIZATION_FLAGS[self]


_OPTIMIZATION_FLAGS: Final[dict[OptimizationLevel, str]] = {
    OptimizationLevel.NONE: "-O0",
    OptimizationLevel.LESS: "-O1",
    OptimizationLevel.MORE: "-O2",
    OptimizationLevel.AGGRESSIVE: "-O3",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CompilerConfig(BaseModel):
    """Toolchain invocation settings attached to a task."""

    model_config = ConfigDict(frozen=True)

    command: str | None = None
    args: tuple[str, ...] = Field(default_factory=tuple)
    output_path: str | None = None
    include_paths: tuple[str, ...] = Field(default_factory=tuple)
    library_paths: tuple[str, ...] = Field(default_factory=tuple)
    defines: dict[str, str] = Field(default_factory=dict)
    optimization_level: OptimizationLevel = OptimizationLevel.NONE
    debug_symbols: bool = False
    warnings_enabled: bool = True
    warnings_as_errors: bool = False


class CompileTask(BaseModel):
    """A unit of compilation work plus its execution state.

    Descriptive fields are fixed at submission time. ``status`` is written only
    by :class:`compilekit.orchestration.scheduler.TaskScheduler`; the remaining
    execution fields are written once when the process finishes.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = ""
    project_path: Path
    source_files: list[str] = Field(default_factory=list)
    language: Language
    compiler: CompilerConfig = Field(default_factory=CompilerConfig)
    priority: TaskPriority = TaskPriority.NORMAL
    created_at: datetime = Field(default_factory=_utcnow)
    dependencies: tuple[str, ...] = Field(default_factory=tuple)
    environment: dict[str, str] = Field(default_factory=dict)
    working_directory: Path | None = None

    status: TaskStatus = TaskStatus.PENDING
    started_at: datetime | None = None
    finished_at: datetime | None = None
    stdout: str = ""
    stderr: str = ""
    exit_code: int | None = None

    @property
    def cwd(self) -> Path:
        """Return the directory the toolchain should run in."""

        return self.working_directory or self.project_path

    def execution_time_ms(self) -> int:
        """Return elapsed execution time in milliseconds."""

        if self.started_at is None:
            return 0
        end = self.finished_at or _utcnow()
        return int((end - self.started_at).total_seconds() * 1000)

    def is_completed(self) -> bool:
        """Return ``True`` when the task reached a terminal status."""

        return self.status.is_terminal

    def is_running(self) -> bool:
        """Return ``True`` while the toolchain process is live."""

        return self.status is TaskStatus.RUNNING

    def is_successful(self) -> bool:
        """Return ``True`` when the task finished with ``SUCCESS``."""

        return self.status is TaskStatus.SUCCESS

    def is_failed(self) -> bool:
        """Return ``True`` when the task finished with ``FAILED``."""

        return self.status is TaskStatus.FAILED


class ErrorSuggestion(BaseModel):
    """Suggested remediation attached to a diagnostic."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    fix_code: str | None = None
    confidence: float = Field(ge=0.0, le=1.0)


class CompileError(BaseModel):
    """Structured compiler diagnostic."""

    model_config = ConfigDict(frozen=True)

    line: int = 0
    column: int = 0
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    code: str | None = None
    file: str = ""
    suggestions: tuple[ErrorSuggestion, ...] = Field(default_factory=tuple)

    @property
    def location(self) -> str:
        """Return ``file:line`` for display."""

        return f"{self.file}:{self.line}"

    @property
    def is_error(self) -> bool:
        """Return ``True`` when the diagnostic counts as an error."""

        return is_error_like(self.severity)


class PerformanceMetrics(BaseModel):
    """Throughput figures collected for a finished compilation."""

    model_config = ConfigDict(frozen=True)

    compilation_time: float = 0.0
    file_count: int = 0
    lines_processed: int = 0
    modules_count: int = 0
    compilation_speed: float = 0.0
    cache_hit_rate: float = Field(default=0.0, ge=0.0, le=1.0)


class DependencyGraph(BaseModel):
    """Directed file → dependency graph."""

    model_config = ConfigDict(frozen=True)

    nodes: frozenset[str] = Field(default_factory=frozenset)
    edges: frozenset[tuple[str, str]] = Field(default_factory=frozenset)

    def neighbours(self, node: str) -> list[str]:
        """Return the sorted direct dependencies of ``node``."""

        return sorted(target for source, target in self.edges if source == node)


class CompileResult(BaseModel):
    """Immutable outcome of a finished compile task."""

    model_config = ConfigDict(frozen=True)

    task_id: str
    success: bool
    output_files: tuple[str, ...] = Field(default_factory=tuple)
    warnings: tuple[CompileError, ...] = Field(default_factory=tuple)
    errors: tuple[CompileError, ...] = Field(default_factory=tuple)
    execution_time: float = 0.0
    memory_usage: int = 0
    peak_memory_usage: int = 0
    performance_metrics: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    dependency_graph: DependencyGraph = Field(default_factory=DependencyGraph)


__all__ = [
    "CompileError",
    "CompileResult",
    "CompileTask",
    "CompilerConfig",
    "DependencyGraph",
    "ErrorSuggestion",
    "HEADER_EXTENSIONS",
    "LANGUAGE_PROFILES",
    "Language",
    "LanguageProfile",
    "OptimizationLevel",
    "PerformanceMetrics",
    "TERMINAL_STATUSES",
    "TaskPriority",
    "TaskStatus",
]
