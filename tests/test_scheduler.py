# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for priority scheduling, dependency gating and cancellation."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from compilekit.config.models import ExecutionConfig
from compilekit.core.errors import TaskNotFoundError
from compilekit.core.models import CompileTask, TaskPriority, TaskStatus
from compilekit.execution.events import CompletedEvent, ErrorEvent, InfoEvent, OutputLineEvent
from compilekit.orchestration.scheduler import TaskScheduler

PythonTaskFactory = Callable[..., CompileTask]

_BLOCKER = "import time; time.sleep(0.5)"
_SLEEPER = "import time; time.sleep(10)"


@pytest.fixture
def scheduler(fast_execution: ExecutionConfig) -> Iterator[TaskScheduler]:
    with TaskScheduler(execution=fast_execution) as instance:
        yield instance


def _wait_for_status(scheduler: TaskScheduler, task_id: str, status: TaskStatus, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while scheduler.status(task_id) is not status:
        if time.monotonic() > deadline:
            raise AssertionError(f"{task_id} never reached {status.value}")
        time.sleep(0.01)


def _started_at(scheduler: TaskScheduler, task_id: str) -> float:
    started = scheduler.get_task(task_id).started_at
    assert started is not None
    return started.timestamp()


def test_successful_task_produces_result_and_analysis(
    scheduler: TaskScheduler,
    python_task: PythonTaskFactory,
) -> None:
    task_id = scheduler.submit(python_task("print('hello')", task_id="ok"))

    assert scheduler.wait(task_id, timeout=30) is TaskStatus.SUCCESS
    result = scheduler.get_result(task_id)
    assert result is not None
    assert result.success
    assert result.errors == ()
    assert scheduler.get_analysis(task_id) is not None
    task = scheduler.get_task(task_id)
    assert task.exit_code == 0
    assert task.stdout == "hello\n"
    assert task.finished_at is not None


def test_observe_replays_the_event_sequence(scheduler: TaskScheduler, python_task: PythonTaskFactory) -> None:
    task_id = scheduler.submit(python_task("print('hello')"))

    events = list(scheduler.observe(task_id))

    assert isinstance(events[0], InfoEvent)
    assert OutputLineEvent("hello", "stdout") in events
    assert events[-1] == CompletedEvent(exit_code=0, success=True)
    assert list(scheduler.observe(task_id)) == events


def test_equal_priority_runs_in_submission_order(scheduler: TaskScheduler, python_task: PythonTaskFactory) -> None:
    scheduler.submit(python_task(_BLOCKER, task_id="blocker"))
    for name in ("first", "second", "third"):
        scheduler.submit(python_task(task_id=name))

    scheduler.wait_all(timeout=30)

    assert _started_at(scheduler, "first") <= _started_at(scheduler, "second") <= _started_at(scheduler, "third")


def test_higher_priority_runs_first(scheduler: TaskScheduler, python_task: PythonTaskFactory) -> None:
    scheduler.submit(python_task(_BLOCKER, task_id="blocker"))
    scheduler.submit(python_task(task_id="low", priority=TaskPriority.LOW))
    scheduler.submit(python_task(task_id="normal"))
    scheduler.submit(python_task(task_id="critical", priority=TaskPriority.CRITICAL))

    statuses = scheduler.wait_all(timeout=30)

    assert set(statuses.values()) == {TaskStatus.SUCCESS}
    assert _started_at(scheduler, "critical") <= _started_at(scheduler, "normal") <= _started_at(scheduler, "low")


def test_dependent_starts_after_dependency_succeeds(
    scheduler: TaskScheduler,
    python_task: PythonTaskFactory,
) -> None:
    scheduler.submit(python_task(_BLOCKER, task_id="base"))
    scheduler.submit(python_task(task_id="app", dependencies=("base",)))

    assert scheduler.wait("app", timeout=30) is TaskStatus.SUCCESS
    base_finished = scheduler.get_task("base").finished_at
    assert base_finished is not None
    assert _started_at(scheduler, "app") >= base_finished.timestamp()


def test_failed_dependency_fails_dependents_without_running(
    scheduler: TaskScheduler,
    python_task: PythonTaskFactory,
) -> None:
    scheduler.submit(python_task("raise SystemExit(1)", task_id="base"))
    scheduler.submit(python_task(task_id="app", dependencies=("base",)))
    scheduler.submit(python_task(task_id="bundle", dependencies=("app",)))

    statuses = scheduler.wait_all(timeout=30)

    assert statuses == {"base": TaskStatus.FAILED, "app": TaskStatus.FAILED, "bundle": TaskStatus.FAILED}
    app = scheduler.get_task("app")
    assert app.started_at is None
    result = scheduler.get_result("app")
    assert result is not None
    assert result.errors[0].message == "Dependency 'base' failed; task was not run"
    assert scheduler.get_result("bundle").errors[0].message.startswith("Dependency 'app'")  # type: ignore[union-attr]
    events = list(scheduler.observe("app"))
    assert events == [ErrorEvent("Dependency 'base' failed; task was not run")]


def test_cancelled_dependency_fails_dependent(scheduler: TaskScheduler, python_task: PythonTaskFactory) -> None:
    scheduler.submit(python_task(task_id="base", dependencies=("not-submitted",)))
    scheduler.submit(python_task(task_id="app", dependencies=("base",)))

    assert scheduler.status("base") is TaskStatus.PENDING
    assert scheduler.cancel("base")

    assert scheduler.status("base") is TaskStatus.CANCELLED
    assert scheduler.status("app") is TaskStatus.FAILED
    assert "cancelled" in scheduler.get_result("app").errors[0].message  # type: ignore[union-attr]


def test_pending_task_has_no_result(scheduler: TaskScheduler, python_task: PythonTaskFactory) -> None:
    task_id = scheduler.submit(python_task(task_id="waiting", dependencies=("later",)))

    assert scheduler.status(task_id) is TaskStatus.PENDING
    assert scheduler.get_result(task_id) is None
    assert scheduler.get_analysis(task_id) is None
    assert scheduler.wait(task_id, timeout=0.05) is TaskStatus.PENDING


def test_cancel_running_task(scheduler: TaskScheduler, python_task: PythonTaskFactory) -> None:
    task_id = scheduler.submit(python_task(_SLEEPER, task_id="slow"))
    _wait_for_status(scheduler, task_id, TaskStatus.RUNNING)

    assert scheduler.cancel(task_id)

    assert scheduler.wait(task_id, timeout=10) is TaskStatus.CANCELLED
    assert list(scheduler.observe(task_id))[-1] == ErrorEvent("Compilation cancelled")
    assert not scheduler.cancel(task_id)


def test_cancel_unknown_or_finished_task(scheduler: TaskScheduler, python_task: PythonTaskFactory) -> None:
    task_id = scheduler.submit(python_task())
    scheduler.wait(task_id, timeout=30)

    assert not scheduler.cancel(task_id)
    assert not scheduler.cancel("nope")


def test_submit_assigns_ids_and_rejects_duplicates(scheduler: TaskScheduler, python_task: PythonTaskFactory) -> None:
    waiting = ("never",)
    assert scheduler.submit(python_task(dependencies=waiting)) == "task_1"
    assert scheduler.submit(python_task(dependencies=waiting)) == "task_2"

    with pytest.raises(ValueError, match="Duplicate"):
        scheduler.submit(python_task(task_id="task_1"))
    with pytest.raises(ValueError, match="itself"):
        scheduler.submit(python_task(task_id="loop", dependencies=("loop",)))


def test_submit_rejects_non_pending_task(scheduler: TaskScheduler, python_task: PythonTaskFactory) -> None:
    task = python_task()
    task.status = TaskStatus.RUNNING

    with pytest.raises(ValueError, match="pending"):
        scheduler.submit(task)


def test_unknown_task_id_raises(scheduler: TaskScheduler) -> None:
    with pytest.raises(TaskNotFoundError):
        scheduler.status("missing")
    with pytest.raises(KeyError):
        scheduler.get_result("missing")


def test_syntax_error_is_parsed_into_diagnostics(
    scheduler: TaskScheduler,
    python_task: PythonTaskFactory,
    tmp_path: Path,
) -> None:
    (tmp_path / "bad.py").write_text("def broken(:\n    pass\n", encoding="utf-8")
    code = "compile(open('bad.py').read(), 'bad.py', 'exec')"

    task_id = scheduler.submit(python_task(code))

    assert scheduler.wait(task_id, timeout=30) is TaskStatus.FAILED
    result = scheduler.get_result(task_id)
    assert result is not None
    assert not result.success
    error = result.errors[0]
    assert error.code == "SyntaxError"
    assert error.file.endswith("bad.py")
    assert error.line == 1


def test_shutdown_cancels_pending_and_rejects_new_work(
    fast_execution: ExecutionConfig,
    python_task: PythonTaskFactory,
) -> None:
    scheduler = TaskScheduler(execution=fast_execution)
    task_id = scheduler.submit(python_task(dependencies=("never",)))

    scheduler.shutdown()

    assert scheduler.status(task_id) is TaskStatus.CANCELLED
    with pytest.raises(RuntimeError):
        scheduler.submit(python_task())


def test_running_tasks_never_exceed_max_concurrency(python_task: PythonTaskFactory) -> None:
    execution = ExecutionConfig(max_concurrency=2, timeout_s=30.0, poll_interval_s=0.02)
    with TaskScheduler(execution=execution) as instance:
        task_ids = [instance.submit(python_task("import time; time.sleep(0.4)")) for _ in range(5)]

        peak = 0
        deadline = time.monotonic() + 15
        while time.monotonic() < deadline:
            statuses = [instance.status(task_id) for task_id in task_ids]
            peak = max(peak, statuses.count(TaskStatus.RUNNING))
            if all(status.is_terminal for status in statuses):
                break
            time.sleep(0.01)

        assert [instance.wait(task_id) for task_id in task_ids] == [TaskStatus.SUCCESS] * 5
    assert peak == 2
