# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console status lines for users and an optional debug trace hook.

Engine components report non-fatal problems (toolchain start failures,
timeouts, truncated output, degraded analysis) through :func:`warn`; the CLI
uses the remaining levels for progress and outcome lines.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Final

from rich.rule import Rule
from rich.text import Text

from ..runtime.console import detect_tty, get_console_manager

DebugLogger = Callable[[str], None]

# level -> (emoji prefix, rich style)
_LEVELS: Final[dict[str, tuple[str, str]]] = {
    "info": ("ℹ️ ", "cyan"),
    "ok": ("✅ ", "green"),
    "warn": ("⚠️ ", "yellow"),
    "fail": ("❌ ", "red"),
}


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _emit(level: str, msg: str, *, use_emoji: bool, use_color: bool | None) -> None:
    prefix, style = _LEVELS[level]
    colour = detect_tty() if use_color is None else use_color
    line = Text(emoji(prefix, use_emoji) + msg, style=style if colour else "")
    get_console_manager().get(color=colour, emoji=use_emoji).print(line)


def section(title: str, *, use_color: bool) -> None:
    """Print a header separating blocks of console output."""

    console = get_console_manager().get(color=use_color, emoji=True)
    if not use_color:
        console.print(f"\n--- {title} ---")
        return
    console.print()
    console.print(Rule(title))


def info(msg: str, *, use_emoji: bool = False, use_color: bool | None = None) -> None:
    _emit("info", msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool = False, use_color: bool | None = None) -> None:
    _emit("ok", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool = False, use_color: bool | None = None) -> None:
    """Report a condition the user should see that does not abort the task."""

    _emit("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool = False, use_color: bool | None = None) -> None:
    _emit("fail", msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["DebugLogger", "emoji", "fail", "info", "ok", "section", "warn"]
