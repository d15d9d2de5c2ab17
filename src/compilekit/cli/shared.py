# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared CLI helpers."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from ..config.models import OutputConfig
from ..core.logging import DebugLogger
from ..runtime.console import detect_tty, get_console_manager


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


def console_for(output: OutputConfig) -> Console:
    """Return the shared console matching ``output`` preferences."""

    return get_console_manager().get(color=output.color and detect_tty(), emoji=output.emoji)


def build_debug_logger(console: Console, *, enabled: bool) -> DebugLogger | None:
    """Return a debug logger printing dimmed trace lines, or ``None`` when disabled."""

    if not enabled:
        return None

    def _debug(message: str) -> None:
        text = Text("[debug] ", style="bold cyan")
        text.append(message, style="dim")
        console.print(text)

    return _debug


def parse_defines(values: list[str] | None) -> dict[str, str]:
    """Parse ``KEY=VALUE`` (or bare ``KEY``) macro definitions.

    Raises:
        CLIError: If a definition has an empty key.
    """

    defines: dict[str, str] = {}
    for raw in values or []:
        key, _, value = raw.partition("=")
        key = key.strip()
        if not key:
            raise CLIError(f"Invalid macro definition: {raw!r}", exit_code=2)
        defines[key] = value
    return defines


__all__ = ["CLIError", "build_debug_logger", "console_for", "parse_defines"]
