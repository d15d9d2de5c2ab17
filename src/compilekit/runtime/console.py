# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared Rich consoles for status lines, event streams and report tables."""

from __future__ import annotations

import sys
from typing import Literal

from rich.console import Console

from ..cache.in_memory import memoize

ConsoleKey = tuple[bool, bool, bool]


def detect_tty() -> bool:
    """Return ``True`` when stdout is attached to a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        # replaced or closed stdout (pytest capture, daemonised runs)
        return False


class RichConsoleManager:
    """Hand out one :class:`Console` per colour/emoji/terminal combination."""

    def __init__(self) -> None:
        self._consoles: dict[ConsoleKey, Console] = {}

    def get(self, *, color: bool, emoji: bool) -> Console:
        """Return the console matching ``color`` and ``emoji``.

        Colour is only honoured when stdout is a terminal, so piped compiler
        output never carries ANSI escapes.
        """

        terminal = detect_tty()
        key: ConsoleKey = (color, emoji, terminal)
        console = self._consoles.get(key)
        if console is None:
            coloured = color and terminal
            system: Literal["auto"] | None = "auto" if coloured else None
            console = Console(
                color_system=system,
                force_terminal=terminal,
                no_color=not coloured,
                emoji=emoji,
                soft_wrap=True,
            )
            self._consoles[key] = console
        return console


@memoize(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide console manager."""

    return RichConsoleManager()


__all__ = ["ConsoleKey", "RichConsoleManager", "detect_tty", "get_console_manager"]
