# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Diagnostic deduplication helpers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from ..core.models import CompileError

AGGREGATION_PREFIX_LENGTH: Final[int] = 50


def aggregation_key(error: CompileError) -> tuple[str, int, str]:
    """Return the key under which similar diagnostics are merged."""

    return error.file, error.line, error.message[:AGGREGATION_PREFIX_LENGTH]


def aggregate_similar(errors: Iterable[CompileError]) -> list[CompileError]:
    """Merge diagnostics that share a file, line and message prefix.

    The first diagnostic of each group is kept in first-seen order. When a group
    holds more than one entry its message is suffixed with the occurrence count,
    e.g. ``"missing ';' (2 similar errors)"``.

    Args:
        errors: Diagnostics in the order they were extracted.

    Returns:
        list[CompileError]: One diagnostic per aggregation key.
    """

    groups: dict[tuple[str, int, str], list[CompileError]] = {}
    for error in errors:
        groups.setdefault(aggregation_key(error), []).append(error)

    merged: list[CompileError] = []
    for members in groups.values():
        first = members[0]
        if len(members) > 1:
            first = first.model_copy(update={"message": f"{first.message} ({len(members)} similar errors)"})
        merged.append(first)
    return merged


__all__ = ["AGGREGATION_PREFIX_LENGTH", "aggregate_similar", "aggregation_key"]
