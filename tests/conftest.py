# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from compilekit.config.models import ExecutionConfig
from compilekit.core.models import CompilerConfig, CompileTask, Language, TaskPriority

PythonTaskFactory = Callable[..., CompileTask]


@pytest.fixture
def python_task(tmp_path: Path) -> PythonTaskFactory:
    """Return a factory for tasks that run inline code with the current interpreter."""

    def _factory(
        code: str = "pass",
        *,
        task_id: str = "",
        priority: TaskPriority = TaskPriority.NORMAL,
        dependencies: tuple[str, ...] = (),
    ) -> CompileTask:
        return CompileTask(
            id=task_id,
            project_path=tmp_path,
            language=Language.PYTHON,
            compiler=CompilerConfig(command=sys.executable, args=("-c", code)),
            priority=priority,
            dependencies=dependencies,
        )

    return _factory


@pytest.fixture
def fast_execution() -> ExecutionConfig:
    """Return execution limits tuned for quick test runs."""

    return ExecutionConfig(max_concurrency=1, timeout_s=30.0, poll_interval_s=0.02)
