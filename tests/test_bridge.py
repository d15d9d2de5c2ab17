# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for process execution, streaming, timeouts and cancellation."""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable
from pathlib import Path

import psutil
import pytest

from compilekit.core.models import CompilerConfig, CompileTask, Language
from compilekit.execution.bridge import ExecutionBridge, new_process_id, read_process_memory
from compilekit.execution.events import CompletedEvent, ErrorEvent, InfoEvent, OutputEvent, OutputLineEvent
from compilekit.execution.process import TIMEOUT_EXIT_CODE

PythonTaskFactory = Callable[..., CompileTask]


def test_events_arrive_in_order_with_stream_names(python_task: PythonTaskFactory) -> None:
    events: list[OutputEvent] = []
    task = python_task("import sys; print('out'); print('err', file=sys.stderr)")

    result = ExecutionBridge(poll_interval=0.02).run(task, events.append)

    assert result.success
    assert result.exit_code == 0
    assert result.stdout == "out\n"
    assert result.stderr == "err\n"
    assert isinstance(events[0], InfoEvent)
    assert events[0].message == "Starting compilation: Python"
    assert events[-1] == CompletedEvent(exit_code=0, success=True)
    lines = {event for event in events if isinstance(event, OutputLineEvent)}
    assert lines == {OutputLineEvent("out", "stdout"), OutputLineEvent("err", "stderr")}


def test_nonzero_exit_is_not_success(python_task: PythonTaskFactory) -> None:
    events: list[OutputEvent] = []

    result = ExecutionBridge(poll_interval=0.02).run(python_task("raise SystemExit(3)"), events.append)

    assert not result.success
    assert result.exit_code == 3
    assert not result.timed_out
    assert events[-1] == CompletedEvent(exit_code=3, success=False)


def test_missing_toolchain_reports_start_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("compilekit.execution.bridge.warn", lambda *_, **__: None)
    events: list[OutputEvent] = []
    task = CompileTask(
        project_path=tmp_path,
        language=Language.C,
        compiler=CompilerConfig(command="compilekit-no-such-compiler"),
    )

    result = ExecutionBridge().run(task, events.append)

    assert result.exit_code == -1
    assert not result.success
    assert "Failed to start compilation process" in result.stderr
    assert [type(event) for event in events] == [InfoEvent, ErrorEvent]


def test_missing_working_directory_reports_start_failure(
    python_task: PythonTaskFactory,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("compilekit.execution.bridge.warn", lambda *_, **__: None)
    task = python_task().model_copy(update={"working_directory": tmp_path / "missing"})

    result = ExecutionBridge().run(task)

    assert result.exit_code == -1
    assert "Working directory does not exist" in result.stderr


def test_timeout_kills_the_process(python_task: PythonTaskFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("compilekit.execution.bridge.warn", lambda *_, **__: None)
    events: list[OutputEvent] = []
    bridge = ExecutionBridge(timeout=0.5, poll_interval=0.05)

    started = time.monotonic()
    result = bridge.run(python_task("import time; time.sleep(10)"), events.append)

    assert time.monotonic() - started < 5
    assert result.timed_out
    assert result.exit_code == TIMEOUT_EXIT_CODE
    assert not result.success
    assert "timed out" in result.stderr
    assert isinstance(events[-1], ErrorEvent)
    assert bridge.active_process_ids() == []


def test_cancel_terminates_running_process(python_task: PythonTaskFactory) -> None:
    bridge = ExecutionBridge(poll_interval=0.02)
    process_id = new_process_id()
    outcome: dict[str, object] = {}

    worker = threading.Thread(
        target=lambda: outcome.setdefault("result", bridge.run(python_task("import time; time.sleep(10)"), process_id=process_id)),
    )
    worker.start()
    deadline = time.monotonic() + 5
    while process_id not in bridge.active_process_ids() and time.monotonic() < deadline:
        time.sleep(0.02)

    assert bridge.cancel(process_id)
    worker.join(timeout=5)

    result = outcome["result"]
    assert result.cancelled
    assert not result.success
    assert result.stderr.endswith("Compilation cancelled")


def test_cancel_before_launch_is_applied_on_start(python_task: PythonTaskFactory) -> None:
    bridge = ExecutionBridge(poll_interval=0.02)
    process_id = bridge.reserve()

    assert bridge.cancel(process_id)
    result = bridge.run(python_task("import time; time.sleep(10)"), process_id=process_id)

    assert result.cancelled
    assert not result.success


def test_output_is_truncated_to_newest_bytes(python_task: PythonTaskFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    warnings: list[str] = []
    monkeypatch.setattr("compilekit.execution.bridge.warn", lambda message, **_: warnings.append(message))
    bridge = ExecutionBridge(poll_interval=0.02, max_output_bytes=1024)

    result = bridge.run(python_task("for i in range(500): print(f'line {i:04d}')"))

    assert result.success
    assert len(result.stdout.encode()) <= 1024
    assert result.stdout.endswith("line 0499\n")
    assert "line 0000" not in result.stdout
    assert any("stdout exceeded 1024 bytes" in message for message in warnings)


def test_raising_listener_is_disabled_after_first_failure(
    python_task: PythonTaskFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    warnings: list[str] = []
    monkeypatch.setattr("compilekit.execution.bridge.warn", lambda message, **_: warnings.append(message))
    calls: list[OutputEvent] = []

    def _listener(event: OutputEvent) -> None:
        calls.append(event)
        raise RuntimeError("listener broke")

    result = ExecutionBridge(poll_interval=0.02).run(python_task("print('a'); print('b')"), _listener)

    assert result.success
    assert len(calls) == 1
    assert len(warnings) == 1


def test_shutdown_refuses_new_launches(python_task: PythonTaskFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("compilekit.execution.bridge.warn", lambda *_, **__: None)
    bridge = ExecutionBridge()
    bridge.shutdown()

    result = bridge.run(python_task())

    assert result.exit_code == -1
    assert not bridge.cancel("proc_unknown")


def test_read_process_memory_for_unknown_pid() -> None:
    assert read_process_memory(2**31 - 1) == (0, 0)


def test_read_process_memory_for_current_process() -> None:
    rss, peak = read_process_memory(os.getpid())

    assert rss > 0
    assert peak >= rss


_SPAWNS_GRANDCHILD = """
import subprocess, sys
child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
print(child.pid, flush=True)
child.wait()
"""


def _wait_until_gone(pid: int, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            if psutil.Process(pid).status() == psutil.STATUS_ZOMBIE:
                return True
        except psutil.NoSuchProcess:
            return True
        time.sleep(0.05)
    return False


def test_timeout_kills_toolchain_subprocesses(python_task: PythonTaskFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("compilekit.execution.bridge.warn", lambda *_, **__: None)
    bridge = ExecutionBridge(timeout=1.0, poll_interval=0.05)

    started = time.monotonic()
    result = bridge.run(python_task(_SPAWNS_GRANDCHILD))
    elapsed = time.monotonic() - started

    assert result.timed_out
    # a surviving grandchild would hold the pipes open until the reader join gives up
    assert elapsed < 4
    grandchild = int(result.stdout.split()[0])
    assert _wait_until_gone(grandchild)


def test_cancel_kills_toolchain_subprocesses(python_task: PythonTaskFactory) -> None:
    bridge = ExecutionBridge(poll_interval=0.02)
    process_id = bridge.reserve()
    lines: list[str] = []
    outcome: dict[str, object] = {}

    def _collect(event: OutputEvent) -> None:
        if isinstance(event, OutputLineEvent):
            lines.append(event.line)

    worker = threading.Thread(
        target=lambda: outcome.setdefault(
            "result", bridge.run(python_task(_SPAWNS_GRANDCHILD), _collect, process_id=process_id)
        ),
    )
    worker.start()
    deadline = time.monotonic() + 5
    while not lines and time.monotonic() < deadline:
        time.sleep(0.02)

    assert bridge.cancel(process_id)
    worker.join(timeout=4)

    assert not worker.is_alive()
    assert outcome["result"].cancelled  # type: ignore[attr-defined]
    assert _wait_until_gone(int(lines[0]))


def test_cancel_after_process_finished_is_rejected(python_task: PythonTaskFactory) -> None:
    bridge = ExecutionBridge(poll_interval=0.02)
    process_id = bridge.reserve()

    first = bridge.run(python_task(), process_id=process_id)

    assert first.success
    assert not bridge.cancel(process_id)
    # nothing was queued, so reusing the id runs normally
    second = bridge.run(python_task(), process_id=process_id)
    assert second.success
    assert not second.cancelled


def test_cancel_of_unreserved_id_is_rejected() -> None:
    assert not ExecutionBridge().cancel(new_process_id())
