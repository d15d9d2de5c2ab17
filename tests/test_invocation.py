# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for toolchain argument construction."""

from __future__ import annotations

from pathlib import Path

from compilekit.core.models import CompilerConfig, CompileTask, Language, OptimizationLevel
from compilekit.execution.invocation import build_invocation, format_invocation


def _task(tmp_path: Path, language: Language, **compiler: object) -> CompileTask:
    return CompileTask(
        project_path=tmp_path,
        language=language,
        source_files=["main.c"] if language is Language.C else ["main.rs"],
        compiler=CompilerConfig(**compiler),
    )


def test_aggressive_debug_build_contains_o3_and_g(tmp_path: Path) -> None:
    task = _task(tmp_path, Language.C, optimization_level=OptimizationLevel.AGGRESSIVE, debug_symbols=True)

    invocation = format_invocation(build_invocation(task))

    assert "-O3" in invocation.split()
    assert "-g" in invocation.split()


def test_gcc_invocation_order(tmp_path: Path) -> None:
    task = _task(
        tmp_path,
        Language.C,
        args=("-std=c11",),
        include_paths=("include",),
        library_paths=("lib",),
        defines={"DEBUG": "1", "FAST": ""},
        warnings_as_errors=True,
        output_path="app",
    )

    argv = build_invocation(task)

    assert argv == [
        "gcc",
        "-std=c11",
        "-O0",
        "-Werror",
        "-Iinclude",
        "-Llib",
        "-DDEBUG=1",
        "-DFAST",
        "main.c",
        "-o",
        "app",
    ]


def test_disabled_warnings_win_over_werror(tmp_path: Path) -> None:
    task = _task(tmp_path, Language.C, warnings_enabled=False, warnings_as_errors=True)

    argv = build_invocation(task)

    assert "-w" in argv
    assert "-Werror" not in argv


def test_rustc_uses_its_own_dialect(tmp_path: Path) -> None:
    task = _task(tmp_path, Language.RUST, optimization_level=OptimizationLevel.MORE, include_paths=("ignored",))

    argv = build_invocation(task)

    assert argv[:3] == ["rustc", "-C", "opt-level=2"]
    assert not any(arg.startswith("-I") for arg in argv)


def test_python_none_level_adds_no_flags(tmp_path: Path) -> None:
    task = CompileTask(project_path=tmp_path, language=Language.PYTHON, source_files=["main.py"])

    assert build_invocation(task) == ["python3", "main.py"]


def test_command_override(tmp_path: Path) -> None:
    task = _task(tmp_path, Language.C, command="clang")

    assert build_invocation(task)[0] == "clang"
