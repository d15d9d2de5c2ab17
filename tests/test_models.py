# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for task and result models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from compilekit.core.errors import InvalidTransitionError, TaskNotFoundError
from compilekit.core.models import (
    CompileError,
    CompileTask,
    ErrorSuggestion,
    Language,
    OptimizationLevel,
    TaskPriority,
    TaskStatus,
)


def test_status_transitions_only_move_forward() -> None:
    assert TaskStatus.PENDING.can_transition_to(TaskStatus.RUNNING)
    assert TaskStatus.PENDING.can_transition_to(TaskStatus.FAILED)
    assert TaskStatus.RUNNING.can_transition_to(TaskStatus.SUCCESS)
    assert not TaskStatus.RUNNING.can_transition_to(TaskStatus.PENDING)
    assert not TaskStatus.SUCCESS.can_transition_to(TaskStatus.FAILED)
    assert not TaskStatus.PENDING.can_transition_to(TaskStatus.SUCCESS)
    assert {status for status in TaskStatus if status.is_terminal} == {
        TaskStatus.SUCCESS,
        TaskStatus.FAILED,
        TaskStatus.CANCELLED,
    }


def test_priority_rank_orders_critical_first() -> None:
    ranked = sorted(TaskPriority, key=lambda priority: priority.rank)
    assert ranked == [TaskPriority.CRITICAL, TaskPriority.HIGH, TaskPriority.NORMAL, TaskPriority.LOW]


def test_language_profile_lookup() -> None:
    assert Language.from_path("src/main.rs") is Language.RUST
    assert Language.from_path("App.KT") is Language.JAVA
    assert Language.from_path("widget.tsx") is Language.JAVASCRIPT
    assert Language.from_path("README") is None
    assert Language.CPP.default_compiler == "g++"
    assert Language.C.display_name == "C"
    assert OptimizationLevel.AGGRESSIVE.flag == "-O3"


def test_task_helpers(tmp_path: Path) -> None:
    task = CompileTask(project_path=tmp_path, language=Language.C)
    assert task.execution_time_ms() == 0
    assert task.cwd == tmp_path

    started = datetime(2025, 1, 1, tzinfo=timezone.utc)
    task.started_at = started
    task.finished_at = started + timedelta(milliseconds=1500)
    task.status = TaskStatus.RUNNING
    assert task.is_running()
    assert not task.is_completed()
    task.status = TaskStatus.FAILED
    assert task.execution_time_ms() == 1500
    assert task.is_completed()
    assert task.is_failed()
    assert not task.is_successful()


def test_working_directory_overrides_project_path(tmp_path: Path) -> None:
    build = tmp_path / "build"
    task = CompileTask(project_path=tmp_path, language=Language.GO, working_directory=build)
    assert task.cwd == build


def test_compile_error_location_and_suggestion_bounds() -> None:
    error = CompileError(file="foo.c", line=3, message="boom")
    assert error.location == "foo.c:3"
    assert error.is_error
    with pytest.raises(ValidationError):
        ErrorSuggestion(title="x", description="y", confidence=1.5)


def test_error_types_render_context() -> None:
    missing = TaskNotFoundError("abc")
    assert isinstance(missing, KeyError)
    assert str(missing) == "Unknown task id: abc"

    transition = InvalidTransitionError("abc", TaskStatus.SUCCESS, TaskStatus.RUNNING)
    assert "success" in str(transition)
    assert transition.target is TaskStatus.RUNNING
