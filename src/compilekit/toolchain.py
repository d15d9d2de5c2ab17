# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Detect which compiler toolchains are available on ``PATH``."""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass
from typing import Final

from .core.logging import DebugLogger
from .core.models import Language
from .execution.process import CommandOptions, run_command

VERSION_PROBE_TIMEOUT: Final[float] = 10.0
NOT_INSTALLED: Final[str] = "Not installed"

VERSION_ARGS: Final[dict[str, tuple[tuple[str, ...], ...]]] = {
    "javac": (("--version",), ("-version",)),
    "node": (("--version",), ("-v",)),
    "go": (("version",),),
}
_DEFAULT_VERSION_ARGS: Final[tuple[tuple[str, ...], ...]] = (("--version",),)
_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"(\d+(?:\.\d+)+)")
_PROBE_OPTIONS: Final[CommandOptions] = CommandOptions(timeout=VERSION_PROBE_TIMEOUT)


@dataclass(frozen=True, slots=True)
class ToolchainInfo:
    """Availability report for one compiler command.

    Attributes:
        name: Command name, e.g. ``gcc``.
        version: First dotted version in the tool's version output, or
            ``"Not installed"``.
        path: Resolved executable path when found.
        installed: ``True`` when the command resolved and reported a version.
        languages: Languages that use this command by default.
    """

    name: str
    version: str
    path: str | None
    installed: bool
    languages: tuple[Language, ...]


def extract_version(text: str | None) -> str | None:
    """Return the first dotted version number in ``text``."""

    if not text:
        return None
    match = _VERSION_PATTERN.search(text)
    return match.group(1) if match else None


def languages_for(command: str) -> tuple[Language, ...]:
    """Return the languages whose default compiler is ``command``."""

    return tuple(language for language in Language if language.default_compiler == command)


def probe_command(command: str, *, debug_logger: DebugLogger | None = None) -> ToolchainInfo:
    """Resolve ``command`` on ``PATH`` and read its version."""

    languages = languages_for(command)
    path = shutil.which(command)
    if path is None:
        return ToolchainInfo(command, NOT_INSTALLED, None, False, languages)

    for args in VERSION_ARGS.get(command, _DEFAULT_VERSION_ARGS):
        try:
            completed = run_command([path, *args], options=_PROBE_OPTIONS)
        except OSError as exc:
            if debug_logger is not None:
                debug_logger(f"{command} {' '.join(args)} failed: {exc}")
            continue
        if completed.returncode != 0:
            continue
        # javac historically prints its version on stderr
        version = extract_version(completed.stdout) or extract_version(completed.stderr)
        if version is not None:
            return ToolchainInfo(command, version, path, True, languages)
    return ToolchainInfo(command, NOT_INSTALLED, path, False, languages)


def probe_toolchain(
    language: Language,
    *,
    command: str | None = None,
    debug_logger: DebugLogger | None = None,
) -> ToolchainInfo:
    """Return availability of the compiler ``language`` uses.

    Args:
        language: Language whose default compiler should be probed.
        command: Optional override for the compiler command.
        debug_logger: Optional callable receiving trace messages.

    Returns:
        ToolchainInfo: Probe outcome; failures are reported as not installed.
    """

    return probe_command(command or language.default_compiler, debug_logger=debug_logger)


def probe_all(*, debug_logger: DebugLogger | None = None) -> list[ToolchainInfo]:
    """Probe every distinct default compiler once."""

    commands = dict.fromkeys(language.default_compiler for language in Language)
    return [probe_command(command, debug_logger=debug_logger) for command in commands]


__all__ = [
    "NOT_INSTALLED",
    "ToolchainInfo",
    "extract_version",
    "languages_for",
    "probe_all",
    "probe_command",
    "probe_toolchain",
]
