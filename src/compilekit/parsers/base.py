# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared parser infrastructure and helper utilities.

A :class:`PatternRule` is plain data: a compiled regular expression whose named
groups (``file``, ``line``, ``column``, ``severity``, ``code``, ``message``,
``function``) map directly onto :class:`~compilekit.core.models.CompileError`
fields. Rules without a ``message`` group only carry a source location, which
the parser attaches to a neighbouring diagnostic.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from ..core.models import ErrorSuggestion
from ..core.severity import ErrorSeverity, severity_from_token


class LocationTarget(str, Enum):
    """Which diagnostic a location-only line belongs to."""

    NEXT = "next"
    PREVIOUS = "previous"


@dataclass(frozen=True, slots=True)
class PatternRule:
    """One ordered extraction rule.

    Attributes:
        pattern: Compiled expression searched against a single output line.
        severity: Severity used when the pattern has no ``severity`` group.
        location_target: Diagnostic that receives a location-only match.
        suggestions: Suggestions attached to every diagnostic the rule creates.
    """

    pattern: re.Pattern[str]
    severity: ErrorSeverity = ErrorSeverity.ERROR
    location_target: LocationTarget = LocationTarget.NEXT
    suggestions: tuple[ErrorSuggestion, ...] = field(default_factory=tuple)

    @property
    def is_location_only(self) -> bool:
        return "message" not in self.pattern.groupindex


@dataclass(frozen=True, slots=True)
class LineMatch:
    """Fields extracted from one line by a :class:`PatternRule`."""

    rule: PatternRule
    file: str = ""
    line: int = 0
    column: int = 0
    severity: ErrorSeverity = ErrorSeverity.ERROR
    code: str | None = None
    message: str = ""
    function: str | None = None


def rule(
    expression: str,
    *,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
    location_target: LocationTarget = LocationTarget.NEXT,
    suggestions: Sequence[ErrorSuggestion] = (),
    flags: int = 0,
) -> PatternRule:
    """Compile ``expression`` into a :class:`PatternRule`."""

    return PatternRule(
        pattern=re.compile(expression, flags),
        severity=severity,
        location_target=location_target,
        suggestions=tuple(suggestions),
    )


def _group(match: re.Match[str], name: str) -> str | None:
    if name not in match.re.groupindex:
        return None
    value = match.group(name)
    return value.strip() if value is not None else None


def _as_int(value: str | None) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0


def match_line(line: str, rules: Sequence[PatternRule]) -> LineMatch | None:
    """Return the fields extracted by the first rule in ``rules`` matching ``line``.

    Args:
        line: Single line of toolchain output.
        rules: Ordered rules, most specific first.

    Returns:
        LineMatch | None: Extracted fields, or ``None`` when nothing matched.
    """

    for candidate in rules:
        match = candidate.pattern.search(line)
        if match is None:
            continue
        message = _group(match, "message") or ""
        if not message and not candidate.is_location_only:
            message = line.strip()
        return LineMatch(
            rule=candidate,
            file=_group(match, "file") or "",
            line=_as_int(_group(match, "line")),
            column=_as_int(_group(match, "column")),
            severity=severity_from_token(_group(match, "severity"), default=candidate.severity),
            code=_group(match, "code"),
            message=message,
            function=_group(match, "function"),
        )
    return None


__all__ = ["LineMatch", "LocationTarget", "PatternRule", "match_line", "rule"]
