# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Translate a task's :class:`CompilerConfig` into a toolchain argument list."""

from __future__ import annotations

import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final

from ..core.models import CompileTask, Language, OptimizationLevel


@dataclass(frozen=True, slots=True)
class FlagDialect:
    """Describe how one toolchain family spells the common compiler options.

    Empty tuples and ``None`` prefixes mean the toolchain has no equivalent and
    the corresponding setting is skipped.
    """

    optimization: Mapping[OptimizationLevel, tuple[str, ...]] = field(default_factory=dict)
    debug: tuple[str, ...] = ()
    no_warnings: tuple[str, ...] = ()
    warnings_as_errors: tuple[str, ...] = ()
    include_prefix: str | None = None
    library_prefix: str | None = None
    define_prefix: str | None = None
    output_flag: str | None = None


GCC_DIALECT: Final[FlagDialect] = FlagDialect(
    optimization={level: (level.flag,) for level in OptimizationLevel},
    debug=("-g",),
    no_warnings=("-w",),
    warnings_as_errors=("-Werror",),
    include_prefix="-I",
    library_prefix="-L",
    define_prefix="-D",
    output_flag="-o",
)

RUSTC_DIALECT: Final[FlagDialect] = FlagDialect(
    optimization={
        OptimizationLevel.NONE: ("-C", "opt-level=0"),
        OptimizationLevel.LESS: ("-C", "opt-level=1"),
        OptimizationLevel.MORE: ("-C", "opt-level=2"),
        OptimizationLevel.AGGRESSIVE: ("-C", "opt-level=3"),
    },
    debug=("-g",),
    no_warnings=("-A", "warnings"),
    warnings_as_errors=("-D", "warnings"),
    library_prefix="-L",
    output_flag="-o",
)

JAVAC_DIALECT: Final[FlagDialect] = FlagDialect(
    debug=("-g",),
    no_warnings=("-nowarn",),
    warnings_as_errors=("-Werror",),
    output_flag="-d",
)

PYTHON_DIALECT: Final[FlagDialect] = FlagDialect(
    optimization={
        OptimizationLevel.LESS: ("-O",),
        OptimizationLevel.MORE: ("-O",),
        OptimizationLevel.AGGRESSIVE: ("-OO",),
    },
    no_warnings=("-W", "ignore"),
    warnings_as_errors=("-W", "error"),
)

GO_DIALECT: Final[FlagDialect] = FlagDialect(output_flag="-o")

NODE_DIALECT: Final[FlagDialect] = FlagDialect()

DIALECTS: Final[dict[Language, FlagDialect]] = {
    Language.C: GCC_DIALECT,
    Language.CPP: GCC_DIALECT,
    Language.RUST: RUSTC_DIALECT,
    Language.JAVA: JAVAC_DIALECT,
    Language.PYTHON: PYTHON_DIALECT,
    Language.GO: GO_DIALECT,
    Language.JAVASCRIPT: NODE_DIALECT,
}


def build_invocation(task: CompileTask) -> list[str]:
    """Return the argument vector that compiles ``task``.

    The order is: toolchain command, explicit ``args``, optimisation, debug
    symbols, warning policy, include paths, library paths, macro definitions,
    source files and finally the output flag.

    Args:
        task: Task whose compiler configuration should be rendered.

    Returns:
        list[str]: Argument vector; the first element is the unresolved command.
    """

    config = task.compiler
    dialect = DIALECTS[task.language]
    argv = [config.command or task.language.default_compiler, *config.args]
    argv.extend(dialect.optimization.get(config.optimization_level, ()))
    if config.debug_symbols:
        argv.extend(dialect.debug)
    if not config.warnings_enabled:
        argv.extend(dialect.no_warnings)
    elif config.warnings_as_errors:
        argv.extend(dialect.warnings_as_errors)
    if dialect.include_prefix:
        argv.extend(f"{dialect.include_prefix}{path}" for path in config.include_paths)
    if dialect.library_prefix:
        argv.extend(f"{dialect.library_prefix}{path}" for path in config.library_paths)
    if dialect.define_prefix:
        for key, value in config.defines.items():
            argv.append(f"{dialect.define_prefix}{key}={value}" if value else f"{dialect.define_prefix}{key}")
    argv.extend(task.source_files)
    if config.output_path and dialect.output_flag:
        argv.extend([dialect.output_flag, config.output_path])
    return argv


def format_invocation(argv: list[str]) -> str:
    """Return ``argv`` as a shell-quoted string for display."""

    return shlex.join(argv)


__all__ = ["DIALECTS", "FlagDialect", "GCC_DIALECT", "build_invocation", "format_invocation"]
