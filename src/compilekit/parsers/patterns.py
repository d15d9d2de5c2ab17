# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-language diagnostic rule tables.

Each language maps to an ordered tuple of rules, most specific first. Adding a
language or a toolchain output format only requires a new table entry.
"""

from __future__ import annotations

import re
from typing import Final

from ..core.models import Language
from ..core.severity import ErrorSeverity
from .base import LocationTarget, PatternRule, rule

_SEVERITY: Final[str] = r"(?P<severity>fatal error|error|warning|warn|note|info)"
_C_SOURCES: Final[str] = r"(?:c|cc|cpp|cxx|c\+\+|h|hh|hpp|hxx)"
_JS_SOURCES: Final[str] = r"(?:js|jsx|ts|tsx|mjs|cjs)"

JAVA_RULES: Final[tuple[PatternRule, ...]] = (
    rule(rf"(?P<file>[^\s:]+\.(?:java|kt)):(?P<line>\d+):(?:(?P<column>\d+):)?\s*{_SEVERITY}:\s*(?P<message>.+)"),
    rule(r"(?P<file>[^\s:]+\.(?:java|kt)):(?P<line>\d+):\s*(?P<message>.+)"),
    rule(rf"^\s*{_SEVERITY}:\s*(?P<message>.+)"),
)

JAVASCRIPT_RULES: Final[tuple[PatternRule, ...]] = (
    rule(
        rf"(?P<file>[^\s(]+\.{_JS_SOURCES})\((?P<line>\d+),(?P<column>\d+)\):\s*{_SEVERITY}\s+"
        r"(?P<code>TS\d+):\s*(?P<message>.+)",
    ),
    rule(rf"(?P<file>[^\s:]+\.{_JS_SOURCES}):(?P<line>\d+):(?P<column>\d+):\s*{_SEVERITY}:\s*(?P<message>.+)"),
    rule(rf"(?P<file>[^\s:]+\.{_JS_SOURCES}):(?P<line>\d+):\s*{_SEVERITY}:\s*(?P<message>.+)"),
    rule(
        rf"^\s*at\s+.*?\(?(?P<file>[^\s():]+\.{_JS_SOURCES}):(?P<line>\d+):(?P<column>\d+)\)?\s*$",
        location_target=LocationTarget.PREVIOUS,
    ),
    rule(r"(?P<code>ReferenceError|SyntaxError|TypeError|RangeError):\s*(?P<message>.+)"),
)

PYTHON_RULES: Final[tuple[PatternRule, ...]] = (
    rule(r'File\s+"(?P<file>[^"]+)",\s*line\s+(?P<line>\d+)(?:,\s*in\s+(?P<function>[\w<>.]+))?'),
    rule(rf"(?P<file>[^\s:]+\.py):(?P<line>\d+):(?:(?P<column>\d+):)?\s*{_SEVERITY}:\s*(?P<message>.+)"),
    rule(
        r"(?P<file>[^\s:]+\.py):(?P<line>\d+):\s*(?P<code>\w+Warning):\s*(?P<message>.+)",
        severity=ErrorSeverity.WARNING,
    ),
    rule(r"^(?P<code>\w+Warning):\s*(?P<message>.+)", severity=ErrorSeverity.WARNING),
    rule(r"^(?P<code>\w+(?:Error|Exception)):\s*(?P<message>.+)"),
)

C_FAMILY_RULES: Final[tuple[PatternRule, ...]] = (
    rule(rf"(?P<file>[^\s:]+\.{_C_SOURCES}):(?P<line>\d+):(?P<column>\d+):\s*{_SEVERITY}:\s*(?P<message>.+)"),
    rule(rf"(?P<file>[^\s:]+\.{_C_SOURCES}):(?P<line>\d+):\s*{_SEVERITY}:\s*(?P<message>.+)"),
    rule(rf"^(?:[\w.+-]+):\s*{_SEVERITY}:\s*(?P<message>.+)"),
    rule(rf"(?P<file>[^\s:]+\.{_C_SOURCES}):(?P<line>\d+):\s*(?P<message>.+)"),
)

RUST_RULES: Final[tuple[PatternRule, ...]] = (
    rule(r"^(?P<severity>error|warning)\[(?P<code>[A-Z]\d{4})\]:\s*(?P<message>.+)"),
    rule(r"-->\s*(?P<file>[^:\s]+):(?P<line>\d+):(?P<column>\d+)", location_target=LocationTarget.PREVIOUS),
    rule(rf"(?P<file>[^\s:]+\.rs):(?P<line>\d+):(?P<column>\d+):\s*{_SEVERITY}:\s*(?P<message>.+)"),
    rule(r"^(?P<severity>error|warning):\s*(?P<message>.+)"),
)

GO_RULES: Final[tuple[PatternRule, ...]] = (
    rule(rf"(?P<file>[^\s:]+\.go):(?P<line>\d+):(?P<column>\d+):\s*{_SEVERITY}:\s*(?P<message>.+)"),
    rule(r"(?P<file>[^\s:]+\.go):(?P<line>\d+):(?P<column>\d+):\s*(?P<message>.+)"),
    rule(r"(?P<file>[^\s:]+\.go):(?P<line>\d+):\s*(?P<message>.+)"),
)

LANGUAGE_RULES: Final[dict[Language, tuple[PatternRule, ...]]] = {
    Language.JAVA: JAVA_RULES,
    Language.JAVASCRIPT: JAVASCRIPT_RULES,
    Language.PYTHON: PYTHON_RULES,
    Language.CPP: C_FAMILY_RULES,
    Language.C: C_FAMILY_RULES,
    Language.RUST: RUST_RULES,
    Language.GO: GO_RULES,
}

# Summary lines toolchains print after the real diagnostics.
IGNORED_LINES: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"^\s*(?:error|warning): aborting due to"),
    re.compile(r"^\s*(?:error|warning): could not compile"),
    re.compile(r"^\s*warning: \d+ warnings? emitted"),
    re.compile(r"^\s*\d+ (?:errors?|warnings?)(?: and \d+ (?:errors?|warnings?))? generated\.?\s*$"),
    re.compile(r"^\s*\d+ errors?\s*$"),
    re.compile(r"^\s*For more information about (?:this|an) error"),
)


def rules_for(language: Language) -> tuple[PatternRule, ...]:
    """Return the ordered rule table for ``language``."""

    return LANGUAGE_RULES.get(language, ())


def is_ignored(line: str) -> bool:
    """Return ``True`` for toolchain summary lines that carry no diagnostic."""

    return any(pattern.search(line) for pattern in IGNORED_LINES)


__all__ = [
    "C_FAMILY_RULES",
    "GO_RULES",
    "IGNORED_LINES",
    "JAVASCRIPT_RULES",
    "JAVA_RULES",
    "LANGUAGE_RULES",
    "PYTHON_RULES",
    "RUST_RULES",
    "is_ignored",
    "rules_for",
]
