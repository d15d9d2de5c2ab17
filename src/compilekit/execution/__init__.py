# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process execution for compile tasks."""

from __future__ import annotations

from .bridge import ExecutionBridge, ProcessResult, new_process_id
from .events import (
    CompletedEvent,
    ErrorEvent,
    EventChannel,
    InfoEvent,
    OutputEvent,
    OutputLineEvent,
    OutputListener,
)
from .invocation import build_invocation, format_invocation

__all__ = [
    "CompletedEvent",
    "ErrorEvent",
    "EventChannel",
    "ExecutionBridge",
    "InfoEvent",
    "OutputEvent",
    "OutputLineEvent",
    "OutputListener",
    "ProcessResult",
    "build_invocation",
    "format_invocation",
    "new_process_id",
]
