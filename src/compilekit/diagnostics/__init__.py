# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Diagnostic parsing, aggregation and reporting."""

from __future__ import annotations

from .core import aggregate_similar
from .parser import DiagnosticParser, ParseResult
from .report import ErrorReport, ErrorSummary, generate_error_report

__all__ = [
    "DiagnosticParser",
    "ErrorReport",
    "ErrorSummary",
    "ParseResult",
    "aggregate_similar",
    "generate_error_report",
]
