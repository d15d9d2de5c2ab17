# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Line-oriented diagnostic extraction rules."""

from __future__ import annotations

from .base import LineMatch, LocationTarget, PatternRule, match_line, rule
from .patterns import IGNORED_LINES, LANGUAGE_RULES, is_ignored, rules_for

__all__ = [
    "IGNORED_LINES",
    "LANGUAGE_RULES",
    "LineMatch",
    "LocationTarget",
    "PatternRule",
    "is_ignored",
    "match_line",
    "rule",
    "rules_for",
]
