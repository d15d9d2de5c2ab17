# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line interface for compilekit."""

from __future__ import annotations

from .app import app, main
from .shared import CLIError

__all__ = ["CLIError", "app", "main"]
