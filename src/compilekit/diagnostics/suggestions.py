# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Curated fix suggestions keyed by error code, keyword and generic fallback."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from ..core.models import CompileError, ErrorSuggestion
from ..parsers.base import PatternRule, rule


def _suggest(title: str, description: str, confidence: float, fix_code: str | None = None) -> ErrorSuggestion:
    return ErrorSuggestion(title=title, description=description, fix_code=fix_code, confidence=confidence)


CODE_SUGGESTIONS: Final[dict[str, ErrorSuggestion]] = {
    # C# compiler
    "CS1001": _suggest(
        "Missing identifier",
        "An identifier is required here; this is usually a syntax or spelling error.",
        0.8,
        "Check the statement syntax and make sure every required identifier is present.",
    ),
    "CS0104": _suggest(
        "Ambiguous type reference",
        "The identifier conflicts with an existing type from another namespace.",
        0.9,
        "Rename the identifier or fully qualify the intended type.",
    ),
    "CS0103": _suggest(
        "Name does not exist",
        "The referenced name does not exist in the current context.",
        0.8,
        "Check the spelling, the using directives and the declaration.",
    ),
    "CS0116": _suggest(
        "Namespace cannot contain members",
        "A method or field was declared directly inside a namespace.",
        0.9,
        "Move the member into a class or struct.",
    ),
    "CS1513": _suggest(
        "Missing closing brace",
        "A block was opened with '{' but never closed.",
        0.95,
        "}",
    ),
    "CS1514": _suggest(
        "Missing opening brace",
        "A block was closed with '}' that has no matching '{'.",
        0.95,
        "{",
    ),
    # rustc
    "E0308": _suggest(
        "Mismatched types",
        "The expression's type differs from the type the context expects.",
        0.85,
        "Convert the value explicitly or change the annotated type.",
    ),
    "E0382": _suggest(
        "Use of moved value",
        "The value was moved earlier and cannot be used again.",
        0.85,
        "Borrow the value with '&' or call .clone() before the move.",
    ),
    "E0425": _suggest(
        "Unresolved name",
        "No variable or function with this name is in scope.",
        0.85,
        "Declare the item or bring it into scope with a 'use' statement.",
    ),
    "E0433": _suggest(
        "Unresolved path",
        "A module or crate in the path could not be found.",
        0.85,
        "Check the 'use' path and the crate dependencies.",
    ),
    "E0599": _suggest(
        "No such method",
        "The type does not implement the method being called.",
        0.8,
        "Check the method name or import the trait that provides it.",
    ),
    # TypeScript
    "TS2304": _suggest(
        "Cannot find name",
        "The identifier is not declared or imported.",
        0.85,
        "Declare the identifier or add the missing import.",
    ),
    "TS2322": _suggest(
        "Type is not assignable",
        "The value's type is incompatible with the declared type.",
        0.8,
        "Adjust the value or widen the declared type.",
    ),
    # Python
    "IndentationError": _suggest(
        "Inconsistent indentation",
        "Block indentation does not line up with the enclosing block.",
        0.9,
        "Indent consistently with four spaces and do not mix tabs and spaces.",
    ),
    "ModuleNotFoundError": _suggest(
        "Module not found",
        "The imported module is not installed or not on the import path.",
        0.85,
        "Install the package or correct the import path.",
    ),
}


@dataclass(frozen=True, slots=True)
class KeywordSuggestion:
    """Suggestion attached when any of ``keywords`` occurs in a message."""

    keywords: tuple[str, ...]
    suggestion: ErrorSuggestion

    def matches(self, message: str) -> bool:
        lowered = message.lower()
        return any(keyword in lowered for keyword in self.keywords)


# Checked in order; only the first match contributes.
KEYWORD_SUGGESTIONS: Final[tuple[KeywordSuggestion, ...]] = (
    KeywordSuggestion(
        ("syntax",),
        _suggest("Syntax error", "The code does not follow the language grammar; check the statement structure.", 0.8),
    ),
    KeywordSuggestion(
        ("undefined",),
        _suggest("Undefined identifier", "A referenced variable, function or class has not been defined.", 0.85),
    ),
    KeywordSuggestion(
        ("missing", "缺少"),
        _suggest(
            "Missing token",
            "A required syntax element such as a semicolon or bracket is missing.",
            0.9,
        ),
    ),
    KeywordSuggestion(
        ("type",),
        _suggest("Type error", "A type does not match what is expected or does not exist.", 0.8),
    ),
)

GENERIC_RULES: Final[tuple[PatternRule, ...]] = (
    rule(
        r"(?i)(?P<message>.*syntax error.*)",
        suggestions=(
            _suggest(
                "Syntax error",
                "The code has a syntax error such as a missing semicolon or unbalanced brackets.",
                0.9,
                "Check the statement syntax around the reported location.",
            ),
        ),
    ),
    rule(
        r"(?i)(?P<message>.*undefined.*)",
        suggestions=(
            _suggest(
                "Undefined symbol",
                "A variable or function is referenced without being defined.",
                0.85,
                "Check that the symbol is declared and imported.",
            ),
        ),
    ),
    rule(
        r"(?i)(?P<message>.*not found.*)",
        suggestions=(
            _suggest(
                "File or resource not found",
                "A referenced file or resource does not exist.",
                0.8,
                "Check that the path is correct and the file exists.",
            ),
        ),
    ),
    rule(
        r"(?i)(?P<message>.*permission denied.*)",
        suggestions=(
            _suggest(
                "Permission denied",
                "The toolchain lacks permission to read, write or execute a path.",
                0.9,
                "Check file permissions and the user the compiler runs as.",
            ),
        ),
    ),
    rule(r"(?i)^\s*(?P<severity>fatal error|error|warning):\s*(?P<message>.+)"),
)


def suggestions_for(error: CompileError) -> tuple[ErrorSuggestion, ...]:
    """Return the suggestions ``error`` should carry after enhancement.

    A known error code replaces any existing suggestions with the curated fix.
    Otherwise the first matching keyword suggestion is prepended to the
    suggestions already attached.
    """

    if error.code and error.code in CODE_SUGGESTIONS:
        return (CODE_SUGGESTIONS[error.code],)
    for candidate in KEYWORD_SUGGESTIONS:
        if candidate.matches(error.message):
            return (candidate.suggestion, *error.suggestions)
    return error.suggestions


def enhance(errors: Sequence[CompileError]) -> list[CompileError]:
    """Return ``errors`` with suggestions attached."""

    enhanced: list[CompileError] = []
    for error in errors:
        suggestions = suggestions_for(error)
        if suggestions != error.suggestions:
            error = error.model_copy(update={"suggestions": suggestions})
        enhanced.append(error)
    return enhanced


__all__ = [
    "CODE_SUGGESTIONS",
    "GENERIC_RULES",
    "KEYWORD_SUGGESTIONS",
    "KeywordSuggestion",
    "enhance",
    "suggestions_for",
]
