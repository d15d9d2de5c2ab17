# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Priority scheduling of compile tasks over a bounded worker pool."""

from __future__ import annotations

import heapq
import itertools
import threading
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from ..analysis.analyzer import ResultAnalyzer
from ..analysis.models import AnalysisResult
from ..config.models import AnalysisConfig, Config, ExecutionConfig
from ..core.errors import InvalidTransitionError, TaskNotFoundError
from ..core.logging import DebugLogger, warn
from ..core.models import CompileError, CompileResult, CompileTask, TaskStatus
from ..diagnostics.parser import DiagnosticParser
from ..execution.bridge import ExecutionBridge, ProcessResult
from ..execution.events import ErrorEvent, EventChannel, OutputEvent
from .metrics import compute_performance_metrics

_BLOCKING_STATUSES = frozenset({TaskStatus.FAILED, TaskStatus.CANCELLED})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class _TaskRecord:
    task: CompileTask
    sequence: int
    process_id: str
    channel: EventChannel = field(default_factory=EventChannel)
    done: threading.Event = field(default_factory=threading.Event)
    result: CompileResult | None = None
    analysis: AnalysisResult | None = None


class TaskScheduler:
    """Queue, gate and run compile tasks.

    Pending tasks are ordered by priority and then by submission order. A task
    starts only once every dependency finished with ``SUCCESS`` and a worker
    slot is free; a dependency ending ``FAILED`` or ``CANCELLED`` fails the
    dependent without running it. The scheduler is the only component that
    writes :attr:`CompileTask.status`, and it never holds its lock while a
    process runs or while output is parsed and analysed.
    """

    def __init__(
        self,
        *,
        execution: ExecutionConfig | None = None,
        analysis: AnalysisConfig | None = None,
        bridge: ExecutionBridge | None = None,
        parser: DiagnosticParser | None = None,
        analyzer: ResultAnalyzer | None = None,
        debug_logger: DebugLogger | None = None,
    ) -> None:
        self._execution = execution or ExecutionConfig()
        self._analysis = analysis or AnalysisConfig()
        self._debug = debug_logger
        self._bridge = bridge or ExecutionBridge(
            timeout=self._execution.timeout_s,
            poll_interval=self._execution.poll_interval_s,
            max_output_bytes=self._execution.max_output_bytes,
            debug_logger=debug_logger,
        )
        self._parser = parser or DiagnosticParser(debug_logger=debug_logger)
        self._analyzer = analyzer or ResultAnalyzer(cache_ttl=self._analysis.cache_ttl_s, debug_logger=debug_logger)
        self._executor = ThreadPoolExecutor(
            max_workers=self._execution.max_concurrency,
            thread_name_prefix="compilekit-task",
        )
        self._lock = threading.Lock()
        self._records: dict[str, _TaskRecord] = {}
        self._queue: list[tuple[int, int, str]] = []
        self._running: set[str] = set()
        self._sequence = itertools.count()
        self._auto_ids = itertools.count(1)
        self._closed = False

    @classmethod
    def from_config(cls, config: Config, *, debug_logger: DebugLogger | None = None) -> TaskScheduler:
        """Build a scheduler from a loaded :class:`Config`."""

        return cls(execution=config.execution, analysis=config.analysis, debug_logger=debug_logger)

    @property
    def max_concurrency(self) -> int:
        return self._execution.max_concurrency

    def __enter__(self) -> TaskScheduler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Public API

    def submit(self, task: CompileTask) -> str:
        """Queue ``task`` and return its id.

        Tasks without an id receive ``task_<n>``. Submission never blocks; the
        task starts immediately when its dependencies are satisfied and a
        worker slot is free.

        Raises:
            ValueError: If the id is already in use, the task depends on itself,
                or the task is not ``PENDING``.
            RuntimeError: If the scheduler has been shut down.
        """

        if task.status is not TaskStatus.PENDING:
            raise ValueError(f"Only pending tasks can be submitted, got {task.status.value}")
        with self._lock:
            if self._closed:
                raise RuntimeError("scheduler has been shut down")
            if not task.id:
                task.id = self._next_auto_id()
            if task.id in self._records:
                raise ValueError(f"Duplicate task id: {task.id}")
            if task.id in task.dependencies:
                raise ValueError(f"Task {task.id} depends on itself")
            sequence = next(self._sequence)
            record = _TaskRecord(task=task, sequence=sequence, process_id=f"proc_{task.id}_{sequence}")
            self._records[task.id] = record
            heapq.heappush(self._queue, (task.priority.rank, sequence, task.id))
            self._trace(f"queued {task.id} ({task.priority.value})")
        self._dispatch()
        return task.id

    def cancel(self, task_id: str) -> bool:
        """Cancel a pending or running task.

        Returns:
            bool: ``True`` when the task was pending or running, ``False`` when it
            is unknown or already finished.
        """

        with self._lock:
            record = self._records.get(task_id)
            if record is None or record.task.status.is_terminal:
                return False
            if record.task.status is TaskStatus.RUNNING:
                process_id = record.process_id
            else:
                self._finish_without_running(record, TaskStatus.CANCELLED, "Compilation cancelled", ())
                process_id = None
        if process_id is not None:
            self._trace(f"cancelling running task {task_id}")
            return self._bridge.cancel(process_id)
        self._dispatch()
        return True

    def status(self, task_id: str) -> TaskStatus:
        """Return the current status of ``task_id``.

        Raises:
            TaskNotFoundError: If ``task_id`` was never submitted.
        """

        with self._lock:
            return self._record(task_id).task.status

    def get_task(self, task_id: str) -> CompileTask:
        with self._lock:
            return self._record(task_id).task

    def observe(self, task_id: str) -> Iterator[OutputEvent]:
        """Return an iterator over every event of ``task_id``.

        The iterator replays events already emitted, blocks for new ones and
        ends after the terminal event.
        """

        with self._lock:
            channel = self._record(task_id).channel
        return iter(channel)

    def get_result(self, task_id: str) -> CompileResult | None:
        """Return the result once ``task_id`` is terminal, else ``None``."""

        with self._lock:
            record = self._record(task_id)
            return record.result if record.done.is_set() else None

    def get_analysis(self, task_id: str) -> AnalysisResult | None:
        """Return the analysis once ``task_id`` is terminal, else ``None``."""

        with self._lock:
            record = self._record(task_id)
            return record.analysis if record.done.is_set() else None

    def wait(self, task_id: str, timeout: float | None = None) -> TaskStatus:
        """Block until ``task_id`` is terminal or ``timeout`` elapses; return its status."""

        with self._lock:
            record = self._record(task_id)
        record.done.wait(timeout)
        return self.status(task_id)

    def wait_all(self, timeout: float | None = None) -> dict[str, TaskStatus]:
        """Wait for every submitted task and return their statuses."""

        with self._lock:
            task_ids = list(self._records)
        return {task_id: self.wait(task_id, timeout) for task_id in task_ids}

    def shutdown(self, *, wait: bool = True) -> None:
        """Cancel pending work, kill running processes and stop the workers."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            for record in self._records.values():
                if record.task.status is TaskStatus.PENDING:
                    self._finish_without_running(record, TaskStatus.CANCELLED, "Compilation cancelled", ())
            self._queue.clear()
        self._bridge.shutdown()
        self._executor.shutdown(wait=wait)

    # ------------------------------------------------------------------
    # Scheduling

    def _dispatch(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._fail_blocked_tasks()
            waiting: list[tuple[int, int, str]] = []
            while self._queue and len(self._running) < self._execution.max_concurrency:
                entry = heapq.heappop(self._queue)
                record = self._records[entry[2]]
                if record.task.status is not TaskStatus.PENDING:
                    continue
                if not self._dependencies_met(record.task):
                    waiting.append(entry)
                    continue
                self._start(record)
            for entry in waiting:
                heapq.heappush(self._queue, entry)

    def _dependencies_met(self, task: CompileTask) -> bool:
        for dependency in task.dependencies:
            record = self._records.get(dependency)
            if record is None or record.task.status is not TaskStatus.SUCCESS:
                return False
        return True

    def _blocking_dependency(self, task: CompileTask) -> CompileTask | None:
        for dependency in task.dependencies:
            record = self._records.get(dependency)
            if record is not None and record.task.status in _BLOCKING_STATUSES:
                return record.task
        return None

    def _fail_blocked_tasks(self) -> None:
        changed = True
        while changed:
            changed = False
            for record in self._records.values():
                if record.task.status is not TaskStatus.PENDING:
                    continue
                blocker = self._blocking_dependency(record.task)
                if blocker is None:
                    continue
                message = f"Dependency '{blocker.id}' {blocker.status.value}; task was not run"
                diagnostic = CompileError(message=message)
                self._finish_without_running(record, TaskStatus.FAILED, message, (diagnostic,))
                changed = True

    def _start(self, record: _TaskRecord) -> None:
        self._transition(record.task, TaskStatus.RUNNING)
        record.task.started_at = _utcnow()
        self._running.add(record.task.id)
        self._bridge.reserve(record.process_id)
        self._trace(f"starting {record.task.id}")
        self._executor.submit(self._execute, record)

    def _finish_without_running(
        self,
        record: _TaskRecord,
        status: TaskStatus,
        message: str,
        errors: tuple[CompileError, ...],
    ) -> None:
        self._transition(record.task, status)
        record.task.finished_at = _utcnow()
        record.result = CompileResult(task_id=record.task.id, success=False, errors=errors)
        record.channel.publish(ErrorEvent(message))
        record.done.set()
        self._trace(f"{record.task.id} finished without running: {message}")

    def _transition(self, task: CompileTask, target: TaskStatus) -> None:
        if not task.status.can_transition_to(target):
            raise InvalidTransitionError(task.id, task.status, target)
        task.status = target

    # ------------------------------------------------------------------
    # Execution (runs on worker threads without holding the lock)

    def _execute(self, record: _TaskRecord) -> None:
        task = record.task
        status = TaskStatus.FAILED
        try:
            process = self._bridge.run(task, record.channel.publish, process_id=record.process_id)
            result, analysis = self._post_process(task, process)
            if process.cancelled:
                status = TaskStatus.CANCELLED
            elif result.success:
                status = TaskStatus.SUCCESS
            with self._lock:
                task.stdout = process.stdout
                task.stderr = process.stderr
                task.exit_code = process.exit_code
                record.result = result
                record.analysis = analysis
        except Exception as exc:  # a worker must always release its slot
            warn(f"Task {task.id} failed unexpectedly: {exc}")
            record.channel.publish(ErrorEvent(f"Internal error: {exc}"))
            with self._lock:
                record.result = CompileResult(
                    task_id=task.id,
                    success=False,
                    errors=(CompileError(message=f"Internal error: {exc}"),),
                )
        finally:
            with self._lock:
                task.finished_at = _utcnow()
                self._transition(task, status)
                self._running.discard(task.id)
                record.channel.close()
                record.done.set()
            self._trace(f"{task.id} finished with {status.value}")
            self._dispatch()

    def _post_process(self, task: CompileTask, process: ProcessResult) -> tuple[CompileResult, AnalysisResult | None]:
        parsed = self._parser.parse(process.stdout, process.stderr, task.language)
        result = CompileResult(
            task_id=task.id,
            success=process.success and parsed.success,
            output_files=_existing_outputs(task),
            warnings=parsed.warnings,
            errors=parsed.errors,
            execution_time=process.execution_time,
            memory_usage=process.memory_usage,
            peak_memory_usage=process.peak_memory_usage,
            performance_metrics=compute_performance_metrics(task, process.execution_time),
        )
        if not self._analysis.enabled:
            return result, None
        analysis = self._analyzer.analyze(result, task)
        result = result.model_copy(update={"dependency_graph": analysis.dependency_analysis.dependency_graph})
        return result, analysis

    # ------------------------------------------------------------------
    # Helpers

    def _record(self, task_id: str) -> _TaskRecord:
        record = self._records.get(task_id)
        if record is None:
            raise TaskNotFoundError(task_id)
        return record

    def _next_auto_id(self) -> str:
        while True:
            candidate = f"task_{next(self._auto_ids)}"
            if candidate not in self._records:
                return candidate

    def _trace(self, message: str) -> None:
        if self._debug is not None:
            self._debug(message)


def _existing_outputs(task: CompileTask) -> tuple[str, ...]:
    output = task.compiler.output_path
    if not output:
        return ()
    path = Path(output)
    if not path.is_absolute():
        path = task.cwd / path
    return (output,) if path.exists() else ()


__all__ = ["TaskScheduler"]
