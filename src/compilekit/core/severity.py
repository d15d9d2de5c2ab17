# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class ErrorSeverity(str, Enum):
    """Severity levels normalising different compiler vocabularies."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


_SEVERITY_TOKENS: Final[dict[str, ErrorSeverity]] = {
    "error": ErrorSeverity.ERROR,
    "fatal": ErrorSeverity.ERROR,
    "fatal error": ErrorSeverity.ERROR,
    "warning": ErrorSeverity.WARNING,
    "warn": ErrorSeverity.WARNING,
    "info": ErrorSeverity.INFO,
    "note": ErrorSeverity.INFO,
}

def severity_from_token(token: str | None, default: ErrorSeverity = ErrorSeverity.ERROR) -> ErrorSeverity:
    """Map a free-text severity token emitted by a compiler onto :class:`ErrorSeverity`.

    ``fatal`` collapses onto ``ERROR`` so that fatal diagnostics are counted with
    ordinary errors; unrecognised tokens fall back to ``default``.

    Args:
        token: Raw label such as ``"error"``, ``"warn"`` or ``"note"``.
        default: Severity returned when ``token`` is empty or unknown.

    Returns:
        ErrorSeverity: Normalised severity.
    """

    if not token:
        return default
    return _SEVERITY_TOKENS.get(token.strip().lower(), default)


def is_error_like(severity: ErrorSeverity) -> bool:
    """Return ``True`` when ``severity`` should be counted as an error."""

    return severity in {ErrorSeverity.ERROR, ErrorSeverity.FATAL}


__all__ = ["ErrorSeverity", "is_error_like", "severity_from_token"]
