# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Turn raw toolchain output into structured, deduplicated diagnostics."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..core.logging import DebugLogger, warn
from ..core.models import CompileError, Language
from ..core.severity import ErrorSeverity, is_error_like
from ..parsers.base import LineMatch, LocationTarget, match_line
from ..parsers.patterns import is_ignored, rules_for
from .core import aggregate_similar
from .report import ErrorReport, generate_error_report
from .suggestions import GENERIC_RULES, enhance


class ParseResult(BaseModel):
    """Diagnostics extracted from one compilation's output.

    ``success`` is ``True`` exactly when ``errors`` is empty. ``total_lines``
    counts every output line and ``processed_lines`` the non-blank ones.
    """

    model_config = ConfigDict(frozen=True)

    errors: tuple[CompileError, ...] = Field(default_factory=tuple)
    warnings: tuple[CompileError, ...] = Field(default_factory=tuple)
    success: bool = True
    total_lines: int = 0
    processed_lines: int = 0


def _split_lines(stdout: str, stderr: str) -> list[str]:
    text = "\n".join(part for part in (stdout, stderr) if part)
    return text.splitlines()


def _error_from_match(match: LineMatch, pending: LineMatch | None) -> CompileError:
    file, line, column, function = match.file, match.line, match.column, match.function
    if not file and pending is not None:
        file, line, column = pending.file, pending.line, pending.column
        function = function or pending.function
    message = match.message
    if function and function != "<module>":
        message = f"{message} (in function '{function}')"
    return CompileError(
        line=line,
        column=column,
        message=message,
        severity=match.severity,
        code=match.code,
        file=file,
        suggestions=match.rule.suggestions,
    )


def _attach_location(error: CompileError, location: LineMatch) -> CompileError:
    return error.model_copy(update={"file": location.file, "line": location.line, "column": location.column})


class DiagnosticParser:
    """Parse toolchain output for a given language.

    Each line is matched against the language's rule table and then against the
    language-agnostic fallback rules. Location-only lines (Python traceback
    frames, rustc ``-->`` pointers, Node stack frames) are folded into the
    neighbouring diagnostic. Informational notes are discarded. Errors and
    warnings are aggregated separately and then enhanced with suggestions.
    """

    def __init__(self, *, debug_logger: DebugLogger | None = None) -> None:
        self._debug = debug_logger

    def parse(self, stdout: str, stderr: str, language: Language) -> ParseResult:
        """Return structured diagnostics for ``stdout``/``stderr``.

        Parsing never raises; an unexpected failure yields a result carrying a
        single synthetic error that describes the problem.
        """

        try:
            return self._parse(stdout, stderr, language)
        except Exception as exc:  # degrade to a synthetic diagnostic
            warn(f"Failed to parse {language.display_name} compiler output: {exc}")
            return ParseResult(
                errors=(CompileError(message=f"Failed to parse output: {exc}", severity=ErrorSeverity.ERROR),),
                success=False,
            )

    def generate_error_report(self, result: ParseResult, language: Language) -> ErrorReport:
        """Return a summary report with remediation hints for ``result``."""

        return generate_error_report(result, language)

    def _parse(self, stdout: str, stderr: str, language: Language) -> ParseResult:
        lines = _split_lines(stdout, stderr)
        rules = rules_for(language)
        collected: list[CompileError] = []
        pending: LineMatch | None = None

        for raw_line in lines:
            if not raw_line.strip() or is_ignored(raw_line):
                continue
            match = match_line(raw_line, rules) or match_line(raw_line, GENERIC_RULES)
            if match is None:
                continue
            if match.rule.is_location_only:
                if match.rule.location_target is LocationTarget.NEXT:
                    pending = match
                elif collected and not collected[-1].file:
                    collected[-1] = _attach_location(collected[-1], match)
                continue
            error = _error_from_match(match, pending)
            pending = None
            if error.severity is ErrorSeverity.INFO:
                continue
            collected.append(error)

        errors = [error for error in collected if is_error_like(error.severity)]
        warnings = [error for error in collected if error.severity is ErrorSeverity.WARNING]
        aggregated_errors = enhance(aggregate_similar(errors))
        aggregated_warnings = enhance(aggregate_similar(warnings))
        if self._debug is not None:
            self._debug(
                f"parsed {len(lines)} line(s): {len(errors)} error(s) -> {len(aggregated_errors)}, "
                f"{len(warnings)} warning(s) -> {len(aggregated_warnings)}",
            )
        return ParseResult(
            errors=tuple(aggregated_errors),
            warnings=tuple(aggregated_warnings),
            success=not aggregated_errors,
            total_lines=len(lines),
            processed_lines=sum(1 for line in lines if line.strip()),
        )


__all__ = ["DiagnosticParser", "ParseResult"]
