# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer application exposing the ``compile`` and ``toolchains`` commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from ..config.loader import load_config
from ..config.models import Config, ConfigError
from ..core.logging import fail, info, ok, section
from ..core.models import CompilerConfig, CompileTask, Language, OptimizationLevel, TaskPriority, TaskStatus
from ..orchestration.scheduler import TaskScheduler
from ..toolchain import probe_all, probe_toolchain
from .rendering import (
    build_analysis_panel,
    build_diagnostics_table,
    build_status_panel,
    build_toolchain_table,
    render_event,
)
from .shared import CLIError, build_debug_logger, console_for, parse_defines

app = typer.Typer(help="Drive local compiler toolchains and analyse their output.", no_args_is_help=True)


def _load(config_path: Path | None, root: Path) -> Config:
    try:
        return load_config(config_path, root=root)
    except ConfigError as exc:
        raise CLIError(f"Failed to load configuration: {exc}", exit_code=2) from exc


def _resolve_language(files: list[Path], language: Language | None) -> Language:
    if language is not None:
        return language
    for file in files:
        guessed = Language.from_path(file)
        if guessed is not None:
            return guessed
    raise CLIError("Cannot infer the language from the given files; pass --language", exit_code=2)


def run_compile(
    files: list[Path],
    *,
    language: Language | None = None,
    compiler: CompilerConfig | None = None,
    priority: TaskPriority = TaskPriority.NORMAL,
    cwd: Path | None = None,
    timeout: float | None = None,
    config_path: Path | None = None,
    verbose: bool = False,
) -> int:
    """Compile ``files`` once, streaming output, and return the exit status.

    Returns:
        int: ``0`` when the task ends ``SUCCESS``, ``1`` otherwise.

    Raises:
        CLIError: For configuration or argument problems.
    """

    root = (cwd or Path.cwd()).resolve()
    config = _load(config_path, root)
    if timeout is not None:
        try:
            config.execution.timeout_s = timeout
        except ValidationError as exc:
            raise CLIError(f"Invalid timeout: {timeout}", exit_code=2) from exc

    console = console_for(config.output)
    debug_logger = build_debug_logger(console, enabled=verbose)
    task = CompileTask(
        project_path=root,
        source_files=[str(file) for file in files],
        language=_resolve_language(files, language),
        compiler=compiler or CompilerConfig(),
        priority=priority,
    )

    output = config.output
    with TaskScheduler.from_config(config, debug_logger=debug_logger) as scheduler:
        task_id = scheduler.submit(task)
        if not output.quiet:
            info(f"Queued {task_id} ({task.language.display_name})", use_emoji=output.emoji, use_color=output.color)
        for event in scheduler.observe(task_id):
            if not output.quiet:
                render_event(console, event)
        status = scheduler.wait(task_id)
        result = scheduler.get_result(task_id)
        analysis = scheduler.get_analysis(task_id)

    if result is not None and (result.errors or result.warnings):
        section("Diagnostics", use_color=output.color)
        console.print(build_diagnostics_table(result))
    if analysis is not None and not output.quiet:
        section("Analysis", use_color=output.color)
        console.print(build_analysis_panel(analysis))
    console.print(build_status_panel(task_id, status, result))
    if status is TaskStatus.SUCCESS and not output.quiet:
        ok(f"{task_id} compiled cleanly", use_emoji=output.emoji, use_color=output.color)
    return 0 if status is TaskStatus.SUCCESS else 1


@app.command("compile")
def compile_command(
    files: Annotated[list[Path], typer.Argument(help="Source files to compile.")],
    language: Annotated[
        Language | None,
        typer.Option("--language", "-l", help="Source language; inferred from extensions when omitted."),
    ] = None,
    compiler: Annotated[str | None, typer.Option("--compiler", help="Override the toolchain command.")] = None,
    opt: Annotated[OptimizationLevel, typer.Option("--opt", help="Optimisation level.")] = OptimizationLevel.NONE,
    debug: Annotated[bool, typer.Option("--debug", "-g", help="Emit debug symbols.")] = False,
    warnings_as_errors: Annotated[
        bool,
        typer.Option("--warnings-as-errors", help="Treat warnings as errors."),
    ] = False,
    no_warnings: Annotated[bool, typer.Option("--no-warnings", help="Suppress warnings.")] = False,
    include: Annotated[list[str] | None, typer.Option("-I", "--include", help="Include search path.")] = None,
    library: Annotated[list[str] | None, typer.Option("-L", "--library", help="Library search path.")] = None,
    define: Annotated[list[str] | None, typer.Option("-D", "--define", help="Macro as KEY=VALUE.")] = None,
    output: Annotated[str | None, typer.Option("-o", "--output", help="Output artifact path.")] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Timeout in seconds.")] = None,
    priority: Annotated[TaskPriority, typer.Option("--priority", help="Task priority.")] = TaskPriority.NORMAL,
    cwd: Annotated[Path | None, typer.Option("--cwd", help="Working directory for the toolchain.")] = None,
    config: Annotated[Path | None, typer.Option("--config", help="Path to a compilekit TOML file.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Print debug traces.")] = False,
) -> None:
    """Compile FILES with a local toolchain and report diagnostics."""

    try:
        compiler_config = CompilerConfig(
            command=compiler,
            output_path=output,
            include_paths=tuple(include or ()),
            library_paths=tuple(library or ()),
            defines=parse_defines(define),
            optimization_level=opt,
            debug_symbols=debug,
            warnings_enabled=not no_warnings,
            warnings_as_errors=warnings_as_errors,
        )
        exit_code = run_compile(
            files,
            language=language,
            compiler=compiler_config,
            priority=priority,
            cwd=cwd,
            timeout=timeout,
            config_path=config,
            verbose=verbose,
        )
    except CLIError as exc:
        fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=exit_code)


@app.command("toolchains")
def toolchains_command(
    language: Annotated[
        Language | None,
        typer.Option("--language", "-l", help="Only probe this language's compiler."),
    ] = None,
) -> None:
    """Show which compiler toolchains are installed."""

    toolchains = [probe_toolchain(language)] if language is not None else probe_all()
    console_for(Config().output).print(build_toolchain_table(toolchains))
    raise typer.Exit(code=0)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "compile_command", "main", "run_compile", "toolchains_command"]
