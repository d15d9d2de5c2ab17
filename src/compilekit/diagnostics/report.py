# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Summaries and remediation hints derived from parsed diagnostics."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, Field

from ..core.models import CompileError, Language
from ..core.severity import ErrorSeverity

if TYPE_CHECKING:
    from .parser import ParseResult

MOST_COMMON_LIMIT: Final[int] = 5

LANGUAGE_HINTS: Final[dict[Language, str]] = {
    Language.JAVA: "Java: make sure every class sits in the right package directory and check the import statements.",
    Language.JAVASCRIPT: "JavaScript: check variable declarations and function scope, and prefer strict mode.",
    Language.PYTHON: "Python: check indentation and syntax, and confirm the interpreter version matches the code.",
    Language.CPP: "C/C++: check header includes, type definitions and function declarations.",
    Language.C: "C/C++: check header includes, type definitions and function declarations.",
    Language.RUST: "Rust: check lifetimes, borrow checker constraints and trait implementations.",
    Language.GO: "Go: check package declarations, import statements and function signatures.",
}


class ErrorSummary(BaseModel):
    """Aggregate counts for a parse result."""

    model_config = ConfigDict(frozen=True)

    total_errors: int
    total_warnings: int
    severity_counts: dict[ErrorSeverity, int] = Field(default_factory=dict)
    most_common_errors: tuple[str, ...] = Field(default_factory=tuple)
    files_with_errors: tuple[str, ...] = Field(default_factory=tuple)


class ErrorReport(BaseModel):
    """Summary, diagnostics and remediation hints for one compilation."""

    model_config = ConfigDict(frozen=True)

    summary: ErrorSummary
    errors: tuple[CompileError, ...] = Field(default_factory=tuple)
    warnings: tuple[CompileError, ...] = Field(default_factory=tuple)
    recommendations: tuple[str, ...] = Field(default_factory=tuple)
    success: bool


def most_common_messages(errors: tuple[CompileError, ...], limit: int = MOST_COMMON_LIMIT) -> list[str]:
    """Return the ``limit`` most frequent messages formatted as ``"Nx: message"``."""

    counts = Counter(error.message for error in errors)
    return [f"{count}x: {message}" for message, count in counts.most_common(limit)]


def build_recommendations(result: ParseResult, language: Language) -> list[str]:
    """Return general and language-specific remediation hints."""

    error_count = len(result.errors)
    if error_count == 0:
        recommendations = ["Compilation succeeded with no errors."]
    elif error_count == 1:
        recommendations = ["Found 1 error; fix it first."]
    else:
        recommendations = [f"Found {error_count} errors; fix them in order of severity."]
    if result.warnings:
        recommendations.append(f"Found {len(result.warnings)} warning(s); review and resolve them.")
    hint = LANGUAGE_HINTS.get(language)
    if hint:
        recommendations.append(hint)
    return recommendations


def generate_error_report(result: ParseResult, language: Language) -> ErrorReport:
    """Build an :class:`ErrorReport` for ``result``.

    Args:
        result: Parsed diagnostics for one compilation.
        language: Language whose remediation hint should be included.

    Returns:
        ErrorReport: Summary counts, the diagnostics and recommendations.
    """

    severity_counts = Counter(diagnostic.severity for diagnostic in (*result.errors, *result.warnings))
    files = dict.fromkeys(error.file for error in result.errors if error.file)
    summary = ErrorSummary(
        total_errors=len(result.errors),
        total_warnings=len(result.warnings),
        severity_counts={severity: severity_counts.get(severity, 0) for severity in ErrorSeverity},
        most_common_errors=tuple(most_common_messages(result.errors)),
        files_with_errors=tuple(files),
    )
    return ErrorReport(
        summary=summary,
        errors=result.errors,
        warnings=result.warnings,
        recommendations=tuple(build_recommendations(result, language)),
        success=result.success,
    )


__all__ = [
    "ErrorReport",
    "ErrorSummary",
    "LANGUAGE_HINTS",
    "build_recommendations",
    "generate_error_report",
    "most_common_messages",
]
