# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Short-lived subprocess helpers shared by toolchain probes and the bridge."""

from __future__ import annotations

import shutil

# Bandit: argument lists only; ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

TIMEOUT_EXIT_CODE: Final[int] = 124


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Options for a probe-style command that runs to completion."""

    cwd: Path | None = None
    capture_output: bool = True
    timeout: float | None = None
    discard_stdin: bool = True


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value


def resolve_executable(head: str) -> str:
    """Return an absolute path for the toolchain command ``head``.

    Raises:
        FileNotFoundError: If ``head`` is an absolute path that does not exist
            or a bare name that is not on ``PATH``.
    """

    candidate = Path(head)
    if candidate.is_absolute():
        if candidate.exists():
            return str(candidate)
        raise FileNotFoundError(f"Executable '{head}' does not exist")
    found = shutil.which(head)
    if found is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return found


def run_command(args: Sequence[str], *, options: CommandOptions | None = None) -> CompletedProcess[str]:
    """Run ``args`` to completion and return its captured result.

    A timeout never raises: the result carries exit code ``124`` and a note is
    appended to ``stderr``. Non-zero exits are returned as-is for the caller
    to interpret.

    Raises:
        ValueError: If ``args`` is empty.
        FileNotFoundError: If the executable cannot be resolved.
    """

    if not args:
        raise ValueError("run_command requires a program to execute")
    opts = options or CommandOptions()
    argv = [resolve_executable(args[0]), *args[1:]]
    try:
        return subprocess.run(  # nosec B603
            argv,
            cwd=opts.cwd,
            check=False,
            capture_output=opts.capture_output,
            text=True,
            timeout=opts.timeout,
            stdin=subprocess.DEVNULL if opts.discard_stdin else None,
        )
    except subprocess.TimeoutExpired as exc:
        note = f"Command timed out after {opts.timeout:.1f}s"
        partial = _as_text(exc.stderr)
        return CompletedProcess(
            args=argv,
            returncode=TIMEOUT_EXIT_CODE,
            stdout=_as_text(exc.stdout),
            stderr=f"{partial}\n{note}" if partial else note,
        )


__all__ = ["CommandOptions", "TIMEOUT_EXIT_CODE", "resolve_executable", "run_command"]
