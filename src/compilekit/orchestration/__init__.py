# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Task scheduling and run-level metrics."""

from __future__ import annotations

from .metrics import compute_performance_metrics, count_lines, modules_count
from .scheduler import TaskScheduler

__all__ = ["TaskScheduler", "compute_performance_metrics", "count_lines", "modules_count"]
